"""
Gate de acesso por rota (conveniência de roteamento, não fronteira de segurança dos dados).

- Rotas de gestão exigem tenant resolvido E sessão autenticada.
- A landing pública do evento exige apenas tenant resolvido.
- Sessão anônima em rota de gestão vira redirect para o login, preservando
  path + query + fragment para restaurar depois da autenticação.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from urllib.parse import urlencode

from showpro.config import LOGIN_PATH
from showpro.services.tenant_resolver import NotFound, Resolved, TenantResolution


class TenantState(str, enum.Enum):
    LOADING = "loading"
    AUTHORIZED = "authorized"
    TENANT_NOT_FOUND = "tenant_not_found"


class AuthState(str, enum.Enum):
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class RouteKind(str, enum.Enum):
    MANAGEMENT = "management"
    PUBLIC = "public"


class GateOutcome(str, enum.Enum):
    WAIT = "wait"
    ALLOW = "allow"
    TENANT_NOT_FOUND = "tenant_not_found"
    LOGIN_REDIRECT = "login_redirect"


@dataclass(frozen=True)
class AccessDecision:
    outcome: GateOutcome
    redirect_to: str | None = None


def tenant_state_for(resolution: TenantResolution | None) -> TenantState:
    if resolution is None:
        return TenantState.LOADING
    if isinstance(resolution, NotFound):
        return TenantState.TENANT_NOT_FOUND
    if isinstance(resolution, Resolved):
        return TenantState.AUTHORIZED
    raise TypeError(f"resolução desconhecida: {resolution!r}")


def auth_state_for(username: str | None) -> AuthState:
    return AuthState.AUTHENTICATED if username else AuthState.ANONYMOUS


def build_return_path(path: str, query: str = "", fragment: str = "") -> str:
    return_to = path or "/"
    if query:
        return_to += "?" + query
    if fragment:
        return_to += "#" + fragment
    return return_to


def login_redirect_url(return_to: str, login_path: str = LOGIN_PATH) -> str:
    return f"{login_path}?{urlencode({'return_to': return_to})}"


def safe_return_path(candidate: str | None) -> str:
    """
    Caminho de retorno pós-login. Só aceita caminho local ("/..."); qualquer outra
    coisa (URL absoluta, "//host", barra invertida) volta para "/".
    """
    if not candidate or not isinstance(candidate, str):
        return "/"
    if not candidate.startswith("/") or candidate.startswith("//") or "\\" in candidate:
        return "/"
    if any(ord(ch) < 0x20 for ch in candidate):
        return "/"
    return candidate


def decide_access(
    tenant_state: TenantState,
    auth_state: AuthState,
    route_kind: RouteKind,
    *,
    path: str = "/",
    query: str = "",
    fragment: str = "",
    login_path: str = LOGIN_PATH,
) -> AccessDecision:
    if tenant_state is TenantState.LOADING:
        return AccessDecision(GateOutcome.WAIT)
    if tenant_state is TenantState.TENANT_NOT_FOUND:
        return AccessDecision(GateOutcome.TENANT_NOT_FOUND)

    if route_kind is RouteKind.MANAGEMENT and auth_state is AuthState.ANONYMOUS:
        return_to = build_return_path(path, query, fragment)
        return AccessDecision(
            GateOutcome.LOGIN_REDIRECT,
            redirect_to=login_redirect_url(return_to, login_path),
        )
    return AccessDecision(GateOutcome.ALLOW)
