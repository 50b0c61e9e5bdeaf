from __future__ import annotations

import logging
import re

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select
from starlette.concurrency import run_in_threadpool

from showpro.errors import StorageError, TenantSlugConflictError
from showpro.lib.url_safety import is_valid_banner_url
from showpro.model.tenant import Tenant

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[a-z0-9-]+")


def is_valid_slug(slug: str) -> bool:
    return isinstance(slug, str) and _SLUG_RE.fullmatch(slug) is not None


def get_tenant_by_slug(session: Session, slug: str) -> Tenant | None:
    # Match exato e case-sensitive.
    return session.exec(select(Tenant).where(Tenant.slug == slug)).first()


class SqlTenantLookup:
    """
    Colaborador de lookup de tenant usado pela resolução (interface async).

    A query é síncrona; roda no threadpool para não bloquear o event loop.
    """

    def __init__(self, session: Session):
        self.session = session

    async def get_tenant_by_slug(self, slug: str) -> Tenant | None:
        try:
            return await run_in_threadpool(get_tenant_by_slug, self.session, slug)
        except SQLAlchemyError as e:
            logger.error(f"Falha ao buscar tenant slug={slug!r}: {e}", exc_info=True)
            raise StorageError("Tenant lookup failed") from e


def create_tenant(
    session: Session,
    *,
    name: str,
    slug: str,
    domain: str | None = None,
    locale: str = "en-US",
    primary_color: str = "#4F46E5",
    logo_url: str | None = None,
    font_family: str | None = None,
) -> Tenant:
    if not is_valid_slug(slug):
        raise ValueError(f"slug inválido: {slug!r} (esperado [a-z0-9-]+)")
    if logo_url is not None and not is_valid_banner_url(logo_url):
        raise ValueError("logo_url inválido (esperado URL https ou data URL base64 jpeg/png/gif/webp)")
    if get_tenant_by_slug(session, slug):
        raise TenantSlugConflictError("Tenant com este slug já existe", details={"slug": slug})

    tenant = Tenant(
        name=name,
        slug=slug,
        domain=domain,
        locale=locale,
        primary_color=primary_color,
        logo_url=logo_url,
        font_family=font_family,
    )
    session.add(tenant)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise TenantSlugConflictError("Tenant com este slug já existe", details={"slug": slug}) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Falha ao criar tenant slug={slug!r}: {e}", exc_info=True)
        raise StorageError("Could not save tenant") from e
    session.refresh(tenant)
    logger.info(f"Tenant criado: id={tenant.id} slug={tenant.slug}")
    return tenant
