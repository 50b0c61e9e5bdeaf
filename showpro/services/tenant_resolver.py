"""
Resolução de tenant: qual workspace uma request pode ver.

Ordem:
  1. Slug explícito do path (/t/{slug}/...) vence sempre, sem olhar o hostname.
  2. Senão, o primeiro label do hostname (acme.example.com -> "acme"), exceto
     "www", hosts de loopback/IP e hosts com sufixo reservado de hospedagem estática.
  3. Sem candidato: slug default configurado.
  4. Lookup do slug no colaborador (async).

O resultado é Resolved(tenant) ou NotFound(slug); quem chama nunca deve trocar
um NotFound por outro tenant.
"""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from showpro.config import DEFAULT_TENANT_SLUG, RESERVED_HOST_SUFFIXES
from showpro.model.tenant import Tenant

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "0.0.0.0"})

TenantLookup = Callable[[str], Awaitable[Optional[Tenant]]]


@dataclass(frozen=True)
class Resolved:
    tenant: Tenant

    @property
    def slug(self) -> str:
        return self.tenant.slug


@dataclass(frozen=True)
class NotFound:
    slug: str


TenantResolution = Union[Resolved, NotFound]


def _strip_port(host: str) -> str | None:
    """Remove a porta; devolve None para literais IPv6 (não carregam subdomínio)."""
    if host.startswith("["):
        return None
    if host.count(":") > 1:
        return None
    return host.split(":", 1)[0]


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def is_non_tenant_host(host: str, reserved_suffixes: tuple[str, ...] = RESERVED_HOST_SUFFIXES) -> bool:
    if host in LOOPBACK_HOSTS or host.endswith(".localhost") or _is_ip_literal(host):
        return True
    return any(host == suffix or host.endswith("." + suffix) for suffix in reserved_suffixes)


def derive_slug_from_host(
    host: str | None,
    reserved_suffixes: tuple[str, ...] = RESERVED_HOST_SUFFIXES,
) -> str | None:
    """Candidato a slug a partir do hostname (header Host, com ou sem porta)."""
    if not host or not isinstance(host, str):
        return None
    hostname = _strip_port(host.strip().lower())
    if not hostname:
        return None
    hostname = hostname.rstrip(".")
    if is_non_tenant_host(hostname, reserved_suffixes):
        return None

    labels = hostname.split(".")
    if len(labels) >= 2 and labels[0] and labels[0] != "www":
        return labels[0]
    return None


def resolve_tenant_slug(
    path_slug: str | None,
    host: str | None,
    *,
    default_slug: str = DEFAULT_TENANT_SLUG,
    reserved_suffixes: tuple[str, ...] = RESERVED_HOST_SUFFIXES,
) -> str:
    if path_slug:
        return path_slug
    return derive_slug_from_host(host, reserved_suffixes) or default_slug


async def resolve_tenant(
    lookup: TenantLookup,
    *,
    path_slug: str | None,
    host: str | None,
    default_slug: str = DEFAULT_TENANT_SLUG,
) -> TenantResolution:
    slug = resolve_tenant_slug(path_slug, host, default_slug=default_slug)
    tenant = await lookup(slug)
    if tenant is None:
        logger.info(f"Tenant não encontrado: slug={slug!r} host={host!r} path_slug={path_slug!r}")
        return NotFound(slug)
    return Resolved(tenant)


class TenantResolutionTracker:
    """
    Estado visível da resolução de tenant de uma sessão (última request vence).

    Cada begin() captura um contador de geração crescente; apply() só aplica o
    resultado se o token ainda for o último emitido. Resultados de requests
    superadas são descartados (cancelamento por ignorar).
    """

    def __init__(self) -> None:
        self._generation = 0
        self.desired_slug: str | None = None
        # None = LOADING
        self.current: TenantResolution | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self.current is None

    def begin(self, slug: str) -> int:
        self._generation += 1
        self.desired_slug = slug
        self.current = None
        return self._generation

    def apply(self, token: int, result: TenantResolution) -> bool:
        if token != self._generation:
            logger.debug(f"Resolução descartada (token={token}, atual={self._generation}, slug={result.slug!r})")
            return False
        self.current = result
        return True

    async def resolve(
        self,
        lookup: TenantLookup,
        *,
        path_slug: str | None,
        host: str | None,
        default_slug: str = DEFAULT_TENANT_SLUG,
    ) -> TenantResolution | None:
        """Resolve e aplica; devolve o estado visível depois da tentativa."""
        slug = resolve_tenant_slug(path_slug, host, default_slug=default_slug)
        token = self.begin(slug)
        result = await resolve_tenant(lookup, path_slug=slug, host=None, default_slug=default_slug)
        self.apply(token, result)
        return self.current
