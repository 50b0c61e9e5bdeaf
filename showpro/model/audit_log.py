from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from showpro.model.base import BaseModel


class AuditLog(BaseModel, table=True):
    __tablename__ = "audit_log"

    tenant_id: int = Field(foreign_key="tenant.id", index=True)

    # Usuário da sessão que executou a ação (login local não tem tabela de contas).
    actor: str = Field(index=True)
    # Sem FK: o registro de auditoria sobrevive à exclusão do evento.
    event_id: int | None = Field(default=None, index=True)

    event_type: str = Field(index=True)
    data: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
