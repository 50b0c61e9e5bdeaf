from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field, field_validator, model_validator

from showpro.lib.url_safety import (
    StreamEmbedClass,
    classify_stream_embed,
    is_http_url,
    is_valid_banner_url,
    parse_inline_image,
)
from showpro.model.base import ensure_utc
from showpro.model.event import EventStatus

SLUG_PATTERN = r"^[a-z0-9-]+$"

# Uploads inline (data URL) são limitados antes de chegar ao gate.
MAX_INLINE_IMAGE_BYTES = 2 * 1024 * 1024


class StreamProvider(str, enum.Enum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    OTHER = "other"


def _require_aware_utc(v: datetime) -> datetime:
    # Diretiva: timestamps sem fuso explícito são inválidos (não "assumimos UTC" na entrada).
    if v.tzinfo is None:
        raise ValueError("datetime sem timezone é inválido (use ISO 8601 com offset, ex: 2025-09-15T09:00:00Z)")
    return v.astimezone(timezone.utc)


def _validate_timezone(v: str) -> str:
    try:
        ZoneInfo(v)
    except Exception as e:
        raise ValueError("timezone inválido (esperado IANA, ex: America/New_York)") from e
    return v


def inline_image_size(url: str) -> int | None:
    """Tamanho decodificado aproximado de uma data URL de imagem; None se não for inline."""
    parsed = parse_inline_image(url)
    if parsed is None:
        return None
    payload = parsed[1]
    return len(payload) * 3 // 4 - payload.count("=")


def validate_image_url(v: str | None) -> str | None:
    if v is None:
        return v
    if not is_valid_banner_url(v):
        raise ValueError("imagem inválida (esperado URL https ou data URL base64 jpeg/png/gif/webp)")
    size = inline_image_size(v)
    if size is not None and size > MAX_INLINE_IMAGE_BYTES:
        raise ValueError("imagem inline deve ter no máximo 2 MB")
    return v


class StreamConfigRead(PydanticBaseModel):
    """Stream como gravado; a página pública reclassifica a URL na renderização."""

    provider: StreamProvider
    embed_url: str
    is_live: bool = False
    replay_url: Optional[str] = None


class StreamConfig(StreamConfigRead):

    @field_validator("replay_url")
    @classmethod
    def validate_replay_url(cls, v: str | None) -> str | None:
        if v is not None and not is_http_url(v):
            raise ValueError("replay_url deve ser uma URL http(s)")
        return v

    @model_validator(mode="after")
    def validate_embed_url(self) -> "StreamConfig":
        if classify_stream_embed(self.embed_url, self.provider) is StreamEmbedClass.REJECTED:
            raise ValueError(
                "embed_url não permitido: youtube/vimeo exigem https em host confiável; "
                "'other' exige URL https"
            )
        return self


class EventSession(PydanticBaseModel):
    title: str = Field(min_length=1)
    start_at: datetime
    end_at: datetime
    description: str = ""
    speaker_name: Optional[str] = None

    @field_validator("start_at", "end_at")
    @classmethod
    def validate_aware(cls, v: datetime) -> datetime:
        return _require_aware_utc(v)

    @model_validator(mode="after")
    def validate_range(self) -> "EventSession":
        if self.end_at < self.start_at:
            raise ValueError("end_at da sessão deve ser >= start_at")
        return self


class Speaker(PydanticBaseModel):
    name: str = Field(min_length=1)
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    headshot_url: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("headshot_url")
    @classmethod
    def validate_headshot(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class EventResource(PydanticBaseModel):
    name: str = Field(min_length=1)
    url: str
    type: str = Field(min_length=1)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not is_http_url(v):
            raise ValueError("url do recurso deve ser http(s)")
        return v


class EventCreate(PydanticBaseModel):
    title: str = Field(min_length=1)
    slug: str = Field(pattern=SLUG_PATTERN)
    status: EventStatus = EventStatus.DRAFT
    start_at: datetime
    end_at: datetime
    timezone: str = "UTC"
    venue: Optional[str] = None
    description: str = ""
    banner_url: Optional[str] = None
    stream: Optional[StreamConfig] = None
    sessions: list[EventSession] = []
    speakers: list[Speaker] = []
    resources: list[EventResource] = []

    @field_validator("start_at", "end_at")
    @classmethod
    def validate_aware(cls, v: datetime) -> datetime:
        return _require_aware_utc(v)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        return _validate_timezone(v)

    @field_validator("banner_url")
    @classmethod
    def validate_banner(cls, v: str | None) -> str | None:
        return validate_image_url(v)

    @model_validator(mode="after")
    def validate_range(self) -> "EventCreate":
        if self.end_at < self.start_at:
            raise ValueError("end_at deve ser >= start_at")
        return self


class EventUpdate(PydanticBaseModel):
    """
    Update parcial. O status não muda por aqui (use publish/archive/unpublish).

    O intervalo start_at/end_at é revalidado no service depois do merge com o evento atual.
    """

    title: Optional[str] = Field(default=None, min_length=1)
    slug: Optional[str] = Field(default=None, pattern=SLUG_PATTERN)
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    timezone: Optional[str] = None
    venue: Optional[str] = None
    description: Optional[str] = None
    banner_url: Optional[str] = None
    stream: Optional[StreamConfig] = None
    sessions: Optional[list[EventSession]] = None
    speakers: Optional[list[Speaker]] = None
    resources: Optional[list[EventResource]] = None

    @field_validator("start_at", "end_at")
    @classmethod
    def validate_aware(cls, v: datetime | None) -> datetime | None:
        return _require_aware_utc(v) if v is not None else v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        return _validate_timezone(v) if v is not None else v

    @field_validator("banner_url")
    @classmethod
    def validate_banner(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class EventRead(PydanticBaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    title: str
    slug: str
    status: EventStatus
    start_at: datetime
    end_at: datetime
    timezone: str
    venue: Optional[str] = None
    description: str = ""
    banner_url: Optional[str] = None
    stream: Optional[StreamConfigRead] = None
    sessions: list[EventSession] = []
    speakers: list[Speaker] = []
    resources: list[EventResource] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("start_at", "end_at", "created_at", "updated_at")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)
