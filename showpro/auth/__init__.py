from showpro.auth.jwt import create_access_token, verify_token
from showpro.auth.dependencies import (
    get_current_username,
    require_management_access,
    require_public_access,
)

__all__ = [
    "create_access_token",
    "verify_token",
    "get_current_username",
    "require_management_access",
    "require_public_access",
]
