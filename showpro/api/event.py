import logging
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel as PydanticBaseModel
from sqlmodel import Session

from showpro.auth.dependencies import TenantAccess, require_management_access, require_public_access
from showpro.db.session import get_session
from showpro.lib.tenant_format import format_event_datetime
from showpro.lib.url_safety import (
    StreamEmbedClass,
    classify_stream_embed,
    describe_stream_embed,
    is_valid_banner_url,
)
from showpro.model.event import Event, EventStatus
from showpro.schema.event import (
    EventCreate,
    EventRead,
    EventResource,
    EventSession,
    EventUpdate,
    Speaker,
    StreamConfigRead,
    StreamProvider,
)
from showpro.services import event_service

logger = logging.getLogger(__name__)

router = APIRouter()  # Sem tag padrão - cada endpoint define sua própria tag


def _actor(access: TenantAccess) -> str:
    return access.username or "anonymous"


@router.get("/events", response_model=list[EventRead], tags=["Event"])
def list_events(
    status: Optional[str] = Query(None, description="Filtrar por status (draft, published, archived)"),
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    """Lista os eventos do tenant atual, ordenados por início."""
    status_enum = None
    if status:
        try:
            status_enum = EventStatus(status.lower())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Status inválido: {status}")
    return event_service.list_events(session, access.tenant.id, status=status_enum)


@router.post("/events", response_model=EventRead, status_code=201, tags=["Event"])
def create_event(
    body: EventCreate,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    return event_service.create_event(session, access.tenant.id, body, actor=_actor(access))


@router.get("/events/{event_id}", response_model=EventRead, tags=["Event"])
def get_event(
    event_id: int,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    return event_service.get_event_by_id(session, access.tenant.id, event_id)


@router.get("/events/by-slug/{event_slug}", response_model=EventRead, tags=["Event"])
def get_event_by_slug(
    event_slug: str,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    """Busca por slug dentro do tenant (qualquer status)."""
    return event_service.get_event_by_slug(session, access.tenant.id, event_slug)


@router.patch("/events/{event_id}", response_model=EventRead, tags=["Event"])
def update_event(
    event_id: int,
    body: EventUpdate,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    return event_service.update_event(session, access.tenant.id, event_id, body, actor=_actor(access))


@router.delete("/events/{event_id}", status_code=204, tags=["Event"])
def delete_event(
    event_id: int,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    event_service.delete_event(session, access.tenant.id, event_id, actor=_actor(access))
    return Response(status_code=204)


def _transition(session: Session, access: TenantAccess, event_id: int, target: EventStatus) -> Event:
    return event_service.change_status(session, access.tenant.id, event_id, target, actor=_actor(access))


@router.post("/events/{event_id}/publish", response_model=EventRead, tags=["Event"])
def publish_event(
    event_id: int,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    return _transition(session, access, event_id, EventStatus.PUBLISHED)


@router.post("/events/{event_id}/archive", response_model=EventRead, tags=["Event"])
def archive_event(
    event_id: int,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    return _transition(session, access, event_id, EventStatus.ARCHIVED)


@router.post("/events/{event_id}/unpublish", response_model=EventRead, tags=["Event"])
def unpublish_event(
    event_id: int,
    access: TenantAccess = Depends(require_management_access),
    session: Session = Depends(get_session),
):
    """Volta o evento para draft (de published ou archived)."""
    return _transition(session, access, event_id, EventStatus.DRAFT)


class EmbedCheckRequest(PydanticBaseModel):
    url: str
    provider: StreamProvider


class EmbedCheckResponse(PydanticBaseModel):
    classification: StreamEmbedClass


@router.post("/embed/check", response_model=EmbedCheckResponse, tags=["Event"])
def check_embed(
    body: EmbedCheckRequest,
    _access: TenantAccess = Depends(require_management_access),
):
    """Pré-visualização do formulário: como a URL de stream seria renderizada."""
    return EmbedCheckResponse(classification=classify_stream_embed(body.url, body.provider))


class StreamEmbed(PydanticBaseModel):
    kind: Literal["iframe", "link", "rejected"]
    url: Optional[str] = None
    sandbox: Optional[str] = None
    message: Optional[str] = None
    is_live: bool = False
    is_replay: bool = False


class LandingTenant(PydanticBaseModel):
    name: str
    slug: str
    primary_color: str
    logo_url: Optional[str] = None
    font_family: Optional[str] = None


class EventLandingResponse(PydanticBaseModel):
    tenant: LandingTenant
    title: str
    slug: str
    description: str
    venue: Optional[str] = None
    timezone: str
    start_at: datetime
    end_at: datetime
    display_start: str
    display_end: str
    banner_url: Optional[str] = None
    stream: Optional[StreamEmbed] = None
    sessions: list[EventSession]
    speakers: list[Speaker]
    resources: list[EventResource]


def build_stream_embed(stream: StreamConfigRead | None, *, event_id: int | None = None) -> StreamEmbed | None:
    """
    Decide o que a landing renderiza para o stream.

    Fora do ar e com replay configurado, o replay é usado no lugar do embed ao vivo.
    """
    if stream is None:
        return None
    use_replay = not stream.is_live and bool(stream.replay_url)
    url = stream.replay_url if use_replay else stream.embed_url
    decision = describe_stream_embed(url, stream.provider)
    if decision.kind == "rejected":
        logger.warning(f"Stream rejeitado na landing (event_id={event_id}, provider={stream.provider.value})")
    return StreamEmbed(
        kind=decision.kind,
        url=decision.url,
        sandbox=decision.sandbox,
        message=decision.message,
        is_live=stream.is_live,
        is_replay=use_replay,
    )


@router.get("/e/{event_slug}", response_model=EventLandingResponse, tags=["Public"])
def get_event_landing(
    event_slug: str,
    access: TenantAccess = Depends(require_public_access),
    session: Session = Depends(get_session),
):
    """Landing pública do evento (apenas eventos publicados do tenant resolvido)."""
    tenant = access.tenant
    event = EventRead.model_validate(
        event_service.get_event_by_slug(session, tenant.id, event_slug, published_only=True)
    )

    banner_url = event.banner_url if is_valid_banner_url(event.banner_url) else None
    return EventLandingResponse(
        tenant=LandingTenant(
            name=tenant.name,
            slug=tenant.slug,
            primary_color=tenant.primary_color,
            logo_url=tenant.logo_url if is_valid_banner_url(tenant.logo_url) else None,
            font_family=tenant.font_family,
        ),
        title=event.title,
        slug=event.slug,
        description=event.description,
        venue=event.venue,
        timezone=event.timezone,
        start_at=event.start_at,
        end_at=event.end_at,
        display_start=format_event_datetime(event.start_at, tenant.locale, event.timezone),
        display_end=format_event_datetime(event.end_at, tenant.locale, event.timezone),
        banner_url=banner_url,
        stream=build_stream_embed(event.stream, event_id=event.id),
        sessions=sorted(event.sessions, key=lambda s: s.start_at),
        speakers=event.speakers,
        resources=event.resources,
    )
