"""
Erros de domínio convertidos em payload HTTP pelo handler em showpro.main.

Os classificadores (URL Safety Gate, resolução de tenant) nunca levantam estes erros para
entrada malformada; eles devolvem valores explícitos. Estes erros aparecem nas bordas:
escrita de eventos, falha de infraestrutura e gate de rotas.
"""

from __future__ import annotations


class ShowproError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, details: object | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class TenantNotFoundError(ShowproError):
    status_code = 404
    code = "TENANT_NOT_FOUND"

    def __init__(self, slug: str):
        super().__init__("Workspace not found", details={"slug": slug})
        self.slug = slug


class TenantSlugConflictError(ShowproError):
    status_code = 409
    code = "TENANT_SLUG_CONFLICT"


class EventNotFoundError(ShowproError):
    status_code = 404
    code = "EVENT_NOT_FOUND"


class EventSlugConflictError(ShowproError):
    status_code = 409
    code = "EVENT_SLUG_CONFLICT"


class InvalidStatusTransitionError(ShowproError):
    status_code = 409
    code = "INVALID_STATUS_TRANSITION"


class EventValidationError(ShowproError):
    status_code = 422
    code = "VALIDATION_ERROR"


class StorageError(ShowproError):
    """Falha do banco (transitória); o retry é responsabilidade do cliente."""

    status_code = 503
    code = "STORAGE_ERROR"


class AuthRequiredError(ShowproError):
    status_code = 401
    code = "AUTH_REQUIRED"

    def __init__(self, redirect_to: str):
        super().__init__("Authentication required", details={"redirect_to": redirect_to})
        self.redirect_to = redirect_to
