"""Database utilities and setup."""
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from prep_admin.config import DATABASE_URL

# Create engine
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Base class for models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_db(request: Request):
    """Dependency to get database session from the app's session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None):
    """Initialize database (create all tables)."""
    # Register mapped classes before create_all
    from prep_admin.models import db as _models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
