from __future__ import annotations

import enum
import logging

from pydantic import BaseModel as PydanticBaseModel, Field, ValidationError

from showpro.services.setting_store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_ACCENT_COLOR = "#4F46E5"


class Theme(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"


def theme_key(tenant_id: int) -> str:
    return f"theme:{tenant_id}"


class ThemeConfig(PydanticBaseModel):
    """
    Configuração de tema do workspace.

    Construída explicitamente: `load()` no início (ou por request) e `save()` a cada
    mudança, sempre contra um KeyValueStore recebido por parâmetro.
    """

    theme: Theme = Theme.LIGHT
    accent_color: str = Field(default=DEFAULT_ACCENT_COLOR, pattern=r"^#[0-9A-Fa-f]{6}$")

    @classmethod
    def load(cls, store: KeyValueStore, key: str) -> "ThemeConfig":
        raw = store.get(key)
        if raw is None:
            return cls()
        try:
            return cls.model_validate(raw)
        except ValidationError:
            # Valor gravado corrompido/antigo: volta ao default sem derrubar a request.
            logger.warning(f"Tema inválido em {key!r}; usando default")
            return cls()

    def save(self, store: KeyValueStore, key: str) -> None:
        store.set(key, self.model_dump(mode="json"))
