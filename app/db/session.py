from __future__ import annotations

from collections.abc import Iterator
from importlib import import_module

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import settings


class Base(DeclarativeBase):
    pass


_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def build_engine(url: str | None = None, **kwargs) -> Engine:
    db_url = url or settings.DATABASE_URL
    if db_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(db_url, echo=settings.DB_ECHO, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    from app.db.wall_clock import install_timestamp_stamping

    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    install_timestamp_stamping(factory)
    return factory


def init_db(url: str | None = None) -> sessionmaker:
    """Create the process-wide engine and session factory. Called once at startup."""
    global _engine, _session_factory
    if _session_factory is None:
        _engine = build_engine(url)
        _session_factory = build_session_factory(_engine)
    return _session_factory


def dispose_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


def get_session_factory() -> sessionmaker:
    if _session_factory is None:
        raise RuntimeError("Database is not initialized; call init_db() at startup")
    return _session_factory


def get_db() -> Iterator[Session]:
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


MODEL_MODULES = (
    "plant",
    "line",
    "machine_type",
    "parameter",
    "machine_type_parameter",
    "machine",
    "part",
    "child_part",
    "shift",
    "pdt_category",
    "updt_category",
    "reject_criteria",
    "user",
    "user_per_line",
    "production_plan",
    "oee_record",
    "rejection_event",
    "downtime_event",
    "notification",
)


def load_models():
    """Import every model module so ``Base.metadata`` holds the full schema."""
    for name in MODEL_MODULES:
        import_module(f"app.models.{name}")
    return Base.metadata
