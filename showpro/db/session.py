from contextlib import contextmanager
from typing import Generator

from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine, SQLModel, Session

from showpro.config import DATABASE_URL


def _normalize_url(raw_url: str) -> str:
    # SQLAlchemy 2 usa psycopg2 para postgresql:// sem driver; forçamos psycopg3.
    if raw_url.startswith("postgresql://"):
        return "postgresql+psycopg://" + raw_url.removeprefix("postgresql://")
    return raw_url


def _build_engine(url: str):
    if url.startswith("sqlite"):
        # SQLite em memória: uma única conexão compartilhada entre threads (TestClient, threadpool).
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=False, pool_pre_ping=True)


# Engine singleton
engine = _build_engine(_normalize_url(DATABASE_URL))


def get_session() -> Generator[Session, None, None]:
    """Dependency do FastAPI para obter sessão do banco."""
    with Session(engine) as session:
        yield session


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
    """Context manager para obter sessão do banco (uso fora de FastAPI Depends)."""
    with Session(engine) as session:
        yield session


def create_tables():
    """Cria todas as tabelas (útil para testes e para o script de seed)."""
    import showpro.model  # noqa: F401  registra os modelos no metadata

    SQLModel.metadata.create_all(engine)


def drop_tables():
    SQLModel.metadata.drop_all(engine)
