from contextlib import contextmanager

from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

# Import all models to ensure they are registered with SQLModel metadata
from .models import TaskDocument  # noqa: F401


def create_store_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Hosted Postgres: disable pooling for serverless and enable pre-ping
    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


@contextmanager
def get_session(engine: Engine):
    """Get a database session bound to ``engine``.

    Usage:
        with get_session(engine) as session:
            # do something with session
    """
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()


def create_tables(engine: Engine) -> None:
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=engine)
