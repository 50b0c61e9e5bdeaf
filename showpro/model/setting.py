from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from showpro.model.base import BaseModel


class Setting(BaseModel, table=True):
    """Par chave/valor persistido (preferências de workspace, tema, etc)."""

    __tablename__ = "setting"

    key: str = Field(unique=True, index=True, nullable=False)
    value: Any = Field(default=None, sa_type=sa.JSON, nullable=True)
