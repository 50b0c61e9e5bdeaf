from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from showpro.auth.jwt import verify_token
from showpro.db.session import get_session
from showpro.errors import AuthRequiredError, TenantNotFoundError
from showpro.model.tenant import Tenant
from showpro.services.access_gate import (
    GateOutcome,
    RouteKind,
    auth_state_for,
    decide_access,
    tenant_state_for,
)
from showpro.services.tenant_resolver import Resolved, TenantResolution, resolve_tenant
from showpro.services.tenant_service import SqlTenantLookup

bearer = HTTPBearer(auto_error=False)


def get_token_payload(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
) -> dict[str, Any]:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return verify_token(credentials.credentials)


def get_current_username(payload: dict[str, Any] = Depends(get_token_payload)) -> str:
    """Dependency que retorna o usuário autenticado a partir do JWT."""
    username = payload.get("sub")
    if not username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return str(username)


async def get_tenant_resolution(
    request: Request,
    session: Session = Depends(get_session),
) -> TenantResolution:
    """
    Resolve o tenant da request: slug do path (/t/{tenant_slug}/...) ou hostname.
    """
    lookup = SqlTenantLookup(session)
    return await resolve_tenant(
        lookup.get_tenant_by_slug,
        path_slug=request.path_params.get("tenant_slug"),
        host=request.headers.get("host"),
    )


@dataclass(frozen=True)
class TenantAccess:
    tenant: Tenant
    username: str | None


def _gate(request: Request, resolution: TenantResolution, route_kind: RouteKind) -> TenantAccess:
    # Preenchido pelo auth_context_middleware (None = anônimo).
    username = getattr(request.state, "username", None)
    decision = decide_access(
        tenant_state_for(resolution),
        auth_state_for(username),
        route_kind,
        path=request.url.path,
        query=request.url.query,
    )
    if decision.outcome is GateOutcome.TENANT_NOT_FOUND:
        raise TenantNotFoundError(resolution.slug)
    if decision.outcome is GateOutcome.LOGIN_REDIRECT:
        raise AuthRequiredError(decision.redirect_to)
    if decision.outcome is not GateOutcome.ALLOW or not isinstance(resolution, Resolved):
        # Resolução é aguardada antes do gate; LOADING aqui é erro de programação.
        raise RuntimeError(f"decisão de acesso inesperada: {decision.outcome}")
    return TenantAccess(tenant=resolution.tenant, username=username)


def require_public_access(
    request: Request,
    resolution: TenantResolution = Depends(get_tenant_resolution),
) -> TenantAccess:
    """Landing pública: só exige tenant resolvido."""
    return _gate(request, resolution, RouteKind.PUBLIC)


def require_management_access(
    request: Request,
    resolution: TenantResolution = Depends(get_tenant_resolution),
) -> TenantAccess:
    """Rotas de gestão: tenant resolvido e sessão autenticada."""
    return _gate(request, resolution, RouteKind.MANAGEMENT)
