from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from showpro.errors import StorageError
from showpro.model.base import utc_now
from showpro.model.setting import Setting

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Armazenamento chave/valor para preferências (valores serializáveis em JSON)."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Valor gravado para a chave, ou None se não existir."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class SqlKeyValueStore(KeyValueStore):
    """KeyValueStore sobre a tabela `setting`."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Any | None:
        try:
            row = self.session.exec(select(Setting).where(Setting.key == key)).first()
        except SQLAlchemyError as e:
            logger.error(f"Falha ao ler setting key={key!r}: {e}", exc_info=True)
            raise StorageError("Could not load setting") from e
        return row.value if row else None

    def set(self, key: str, value: Any) -> None:
        try:
            row = self.session.exec(select(Setting).where(Setting.key == key)).first()
            if row is None:
                row = Setting(key=key, value=value)
            else:
                row.value = value
                row.updated_at = utc_now()
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Falha ao gravar setting key={key!r}: {e}", exc_info=True)
            raise StorageError("Could not save setting") from e
