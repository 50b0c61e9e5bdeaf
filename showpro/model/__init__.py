from showpro.model.base import BaseModel
from showpro.model.tenant import Tenant
from showpro.model.event import Event, EventStatus
from showpro.model.audit_log import AuditLog
from showpro.model.setting import Setting

__all__ = ["BaseModel", "Tenant", "Event", "EventStatus", "AuditLog", "Setting"]
