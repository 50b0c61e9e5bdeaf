from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from showpro.errors import (
    EventNotFoundError,
    EventSlugConflictError,
    EventValidationError,
    InvalidStatusTransitionError,
    StorageError,
)
from showpro.model.audit_log import AuditLog
from showpro.model.base import ensure_utc, utc_now
from showpro.model.event import Event, EventStatus
from showpro.schema.event import EventCreate, EventUpdate

logger = logging.getLogger(__name__)

# Transições de status permitidas (publicação é transição, não entidade).
_ALLOWED_TRANSITIONS: dict[EventStatus, set[EventStatus]] = {
    EventStatus.DRAFT: {EventStatus.PUBLISHED},
    EventStatus.PUBLISHED: {EventStatus.ARCHIVED, EventStatus.DRAFT},
    EventStatus.ARCHIVED: {EventStatus.DRAFT},
}

_NESTED_FIELDS = ("stream", "sessions", "speakers", "resources")
_NON_NULLABLE_FIELDS = {"title", "slug", "start_at", "end_at", "timezone", "description", "sessions", "speakers", "resources"}


def _try_write_audit_log(session: Session, audit: AuditLog) -> None:
    """
    Auditoria best-effort: não deve quebrar a request se falhar.
    """
    try:
        session.add(audit)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning(f"Falha ao gravar audit_log ({audit.event_type}): {e}")


def _commit(session: Session, *, tenant_id: int, slug: str | None = None) -> None:
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise EventSlugConflictError(
            "Já existe um evento com este slug neste tenant",
            details={"slug": slug},
        ) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Falha ao gravar evento (tenant_id={tenant_id}, slug={slug!r}): {e}", exc_info=True)
        raise StorageError("Could not save event") from e


def _exec(session: Session, statement):
    try:
        return session.exec(statement)
    except SQLAlchemyError as e:
        logger.error(f"Falha ao consultar eventos: {e}", exc_info=True)
        raise StorageError("Could not load events") from e


def _ensure_slug_available(session: Session, tenant_id: int, slug: str, *, exclude_id: int | None = None) -> None:
    query = select(Event.id).where(Event.tenant_id == tenant_id, Event.slug == slug)
    if exclude_id is not None:
        query = query.where(Event.id != exclude_id)
    if _exec(session, query).first() is not None:
        raise EventSlugConflictError(
            "Já existe um evento com este slug neste tenant",
            details={"slug": slug},
        )


def list_events(session: Session, tenant_id: int, *, status: EventStatus | None = None) -> list[Event]:
    query = select(Event).where(Event.tenant_id == tenant_id)
    if status is not None:
        query = query.where(Event.status == status)
    query = query.order_by(Event.start_at.asc(), Event.id.asc())
    return list(_exec(session, query).all())


def get_event_by_id(session: Session, tenant_id: int, event_id: int) -> Event:
    """Busca por id sempre escopada ao tenant (evento de outro tenant = não encontrado)."""
    event = _exec(
        session,
        select(Event).where(Event.id == event_id, Event.tenant_id == tenant_id),
    ).first()
    if not event:
        raise EventNotFoundError("Evento não encontrado", details={"event_id": event_id})
    return event


def get_event_by_slug(
    session: Session,
    tenant_id: int,
    slug: str,
    *,
    published_only: bool = False,
) -> Event:
    query = select(Event).where(Event.tenant_id == tenant_id, Event.slug == slug)
    if published_only:
        query = query.where(Event.status == EventStatus.PUBLISHED)
    event = _exec(session, query).first()
    if not event:
        raise EventNotFoundError("Evento não encontrado", details={"slug": slug})
    return event


def create_event(session: Session, tenant_id: int, data: EventCreate, *, actor: str) -> Event:
    _ensure_slug_available(session, tenant_id, data.slug)

    nested = data.model_dump(mode="json", include=set(_NESTED_FIELDS))
    event = Event(
        tenant_id=tenant_id,
        slug=data.slug,
        title=data.title,
        description=data.description,
        status=data.status,
        start_at=data.start_at,
        end_at=data.end_at,
        timezone=data.timezone,
        venue=data.venue,
        banner_url=data.banner_url,
        stream=nested.get("stream"),
        sessions=nested.get("sessions", []),
        speakers=nested.get("speakers", []),
        resources=nested.get("resources", []),
    )
    session.add(event)
    _commit(session, tenant_id=tenant_id, slug=data.slug)
    session.refresh(event)
    logger.info(f"Evento criado: id={event.id} tenant_id={tenant_id} slug={event.slug}")

    _try_write_audit_log(
        session,
        AuditLog(
            tenant_id=tenant_id,
            actor=actor,
            event_id=event.id,
            event_type="event_created",
            data={"slug": event.slug, "status": event.status.value},
        ),
    )
    return event


def update_event(session: Session, tenant_id: int, event_id: int, data: EventUpdate, *, actor: str) -> Event:
    event = get_event_by_id(session, tenant_id, event_id)
    changes = data.model_dump(exclude_unset=True)

    null_fields = sorted(k for k, v in changes.items() if v is None and k in _NON_NULLABLE_FIELDS)
    if null_fields:
        raise EventValidationError("Campos obrigatórios não podem ser nulos", details={"fields": null_fields})

    start_at = changes.get("start_at", ensure_utc(event.start_at))
    end_at = changes.get("end_at", ensure_utc(event.end_at))
    if end_at < start_at:
        raise EventValidationError("end_at deve ser >= start_at", details={"fields": ["start_at", "end_at"]})

    if "slug" in changes and changes["slug"] != event.slug:
        _ensure_slug_available(session, tenant_id, changes["slug"], exclude_id=event.id)

    nested = data.model_dump(mode="json", exclude_unset=True, include=set(_NESTED_FIELDS))
    for field, value in changes.items():
        # Listas/objetos JSON são reatribuídos inteiros para o SQLAlchemy detectar a mudança.
        setattr(event, field, nested[field] if field in nested else value)
    event.updated_at = utc_now()
    session.add(event)
    _commit(session, tenant_id=tenant_id, slug=event.slug)
    session.refresh(event)

    _try_write_audit_log(
        session,
        AuditLog(
            tenant_id=tenant_id,
            actor=actor,
            event_id=event.id,
            event_type="event_updated",
            data={"fields": sorted(changes.keys())},
        ),
    )
    return event


def change_status(
    session: Session,
    tenant_id: int,
    event_id: int,
    target: EventStatus,
    *,
    actor: str,
) -> Event:
    """Aplica uma transição de status. Mesma origem e destino é idempotente."""
    event = get_event_by_id(session, tenant_id, event_id)
    prev_status = event.status
    if prev_status == target:
        return event
    if target not in _ALLOWED_TRANSITIONS[prev_status]:
        raise InvalidStatusTransitionError(
            f"Transição não permitida: {prev_status.value} -> {target.value}",
            details={"from_status": prev_status.value, "to_status": target.value},
        )

    event.status = target
    event.updated_at = utc_now()
    session.add(event)
    _commit(session, tenant_id=tenant_id, slug=event.slug)
    session.refresh(event)

    _try_write_audit_log(
        session,
        AuditLog(
            tenant_id=tenant_id,
            actor=actor,
            event_id=event.id,
            event_type="event_status_changed",
            data={"from_status": prev_status.value, "to_status": event.status.value},
        ),
    )
    return event


def delete_event(session: Session, tenant_id: int, event_id: int, *, actor: str) -> None:
    event = get_event_by_id(session, tenant_id, event_id)
    slug = event.slug
    session.delete(event)
    _commit(session, tenant_id=tenant_id, slug=slug)
    logger.info(f"Evento removido: id={event_id} tenant_id={tenant_id} slug={slug}")

    _try_write_audit_log(
        session,
        AuditLog(
            tenant_id=tenant_id,
            actor=actor,
            event_id=event_id,
            event_type="event_deleted",
            data={"slug": slug},
        ),
    )


def summarize_events(session: Session, tenant_id: int, *, now: datetime | None = None, limit: int = 5) -> dict[str, Any]:
    """Resumo do dashboard: contagem por status e próximos eventos publicados."""
    now = ensure_utc(now) if now else utc_now()
    events = list_events(session, tenant_id)

    counts = {status.value: 0 for status in EventStatus}
    for event in events:
        counts[event.status.value] += 1

    upcoming = [
        event
        for event in events
        if event.status == EventStatus.PUBLISHED and ensure_utc(event.end_at) >= now
    ]
    return {
        "total": len(events),
        "counts": counts,
        "upcoming": upcoming[:limit],
    }
