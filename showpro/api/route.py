from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field, field_validator
from sqlmodel import Session

from showpro.api.auth import router as auth_router
from showpro.api.event import router as event_router
from showpro.auth.dependencies import (
    TenantAccess,
    get_current_username,
    require_management_access,
    require_public_access,
)
from showpro.db.session import get_session
from showpro.schema.event import SLUG_PATTERN, EventRead, validate_image_url
from showpro.services import event_service
from showpro.services.setting_store import SqlKeyValueStore
from showpro.services.tenant_service import create_tenant as create_tenant_record
from showpro.services.theme_service import Theme, ThemeConfig, theme_key


router = APIRouter()  # Sem tag padrão - cada endpoint define sua própria tag
router.include_router(auth_router)

# Rotas escopadas ao tenant. Montadas duas vezes: tenant pelo hostname (/...)
# e tenant explícito no path (/t/{tenant_slug}/...).
tenant_router = APIRouter()
tenant_router.include_router(event_router)

_HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


@router.get("/health", tags=["System"])
def health():
    """Health check endpoint."""
    return {"status": "ok"}


class TenantCreate(PydanticBaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(pattern=SLUG_PATTERN)
    domain: Optional[str] = None
    locale: str = "en-US"
    primary_color: str = Field(default="#4F46E5", pattern=_HEX_COLOR)
    logo_url: Optional[str] = None
    font_family: Optional[str] = None

    @field_validator("logo_url")
    @classmethod
    def validate_logo(cls, v: str | None) -> str | None:
        # Logo aparece na landing pública: mesmas regras do banner.
        return validate_image_url(v)


class TenantResponse(PydanticBaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    domain: Optional[str] = None
    locale: str
    primary_color: str
    logo_url: Optional[str] = None
    font_family: Optional[str] = None
    created_at: datetime
    updated_at: datetime


@router.post("/tenants", response_model=TenantResponse, status_code=201, tags=["Tenant"])
def create_tenant(
    body: TenantCreate,
    _username: str = Depends(get_current_username),
    session: Session = Depends(get_session),
):
    """Cria um novo tenant (processo administrativo). O slug não pode ser alterado depois."""
    try:
        return create_tenant_record(session, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@tenant_router.get("/tenant", response_model=TenantResponse, tags=["Tenant"])
def get_resolved_tenant(access: TenantAccess = Depends(require_public_access)):
    """Tenant resolvido para a request (path ou hostname) com branding."""
    return access.tenant


class DashboardResponse(PydanticBaseModel):
    total: int
    counts: dict[str, int]
    upcoming: list[EventRead]


@tenant_router.get("/dashboard", response_model=DashboardResponse, tags=["Dashboard"])
def get_dashboard(
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    return event_service.summarize_events(session, access.tenant.id)


class ThemeUpdate(PydanticBaseModel):
    theme: Optional[Theme] = None
    accent_color: Optional[str] = Field(default=None, pattern=_HEX_COLOR)


@tenant_router.get("/settings/theme", response_model=ThemeConfig, tags=["Settings"])
def get_theme(
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    return ThemeConfig.load(SqlKeyValueStore(session), theme_key(access.tenant.id))


@tenant_router.put("/settings/theme", response_model=ThemeConfig, tags=["Settings"])
def update_theme(
    body: ThemeUpdate,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    """Atualiza tema/cor de destaque do workspace e grava a cada mudança."""
    store = SqlKeyValueStore(session)
    key = theme_key(access.tenant.id)
    current = ThemeConfig.load(store, key)
    updated = current.model_copy(update=body.model_dump(exclude_none=True))
    updated.save(store, key)
    return updated


router.include_router(tenant_router)
router.include_router(tenant_router, prefix="/t/{tenant_slug}")
