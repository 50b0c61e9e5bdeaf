from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from showpro.model.base import BaseModel


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Event(BaseModel, table=True):
    """
    Modelo Event - listagem de evento de um tenant.

    Observações:
      - `slug` é único dentro do tenant (não globalmente).
      - `stream`, `sessions`, `speakers` e `resources` pertencem exclusivamente ao evento
        e são gravados como JSON na própria linha; a ordem das listas é a ordem de exibição.
      - `start_at`/`end_at` são instantes UTC; `timezone` é apenas para exibição.
    """

    __tablename__ = "event"

    tenant_id: int = Field(foreign_key="tenant.id", index=True, nullable=False)
    slug: str = Field(index=True, nullable=False)
    title: str = Field(nullable=False)
    description: str = Field(default="", sa_type=sa.Text)

    # Persistir enums pelos *values* ("draft", "published", ...).
    status: EventStatus = Field(
        default=EventStatus.DRAFT,
        sa_type=sa.Enum(
            EventStatus,
            name="event_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        index=True,
    )

    start_at: datetime = Field(sa_type=sa.DateTime(timezone=True), nullable=False)
    end_at: datetime = Field(sa_type=sa.DateTime(timezone=True), nullable=False)
    timezone: str = Field(default="UTC")
    venue: str | None = Field(default=None, nullable=True)

    # Pode conter data URL base64 (upload local), por isso Text.
    banner_url: str | None = Field(default=None, sa_type=sa.Text, nullable=True)

    stream: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON, nullable=True)
    sessions: list[dict[str, Any]] = Field(default_factory=list, sa_type=sa.JSON)
    speakers: list[dict[str, Any]] = Field(default_factory=list, sa_type=sa.JSON)
    resources: list[dict[str, Any]] = Field(default_factory=list, sa_type=sa.JSON)

    __table_args__ = (
        UniqueConstraint("tenant_id", "slug", name="uq_event_tenant_slug"),
    )
