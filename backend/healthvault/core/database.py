"""Database configuration and session management."""

from contextlib import contextmanager
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database URL."""
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        # Sessions are handed across FastAPI's threadpool workers
        connect_args["check_same_thread"] = False

    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        echo=settings.debug,
        connect_args=connect_args,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to ``engine``."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    The session factory is built once per application in ``create_app`` and
    kept on ``app.state``.

    Usage:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(session_factory: sessionmaker):
    """
    Context manager for database sessions outside of a request.

    Usage:
        with session_scope(factory) as db:
            db.query(User).all()
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine) -> None:
    """Initialize database - create all tables."""
    from ..models import Base

    Base.metadata.create_all(bind=engine)
