from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prep_admin.database import init_db
from prep_admin.services.ai_service import SuggestionClient
from prep_admin.services.document_store import DocumentStore
from prep_admin.services.permission_service import AdminDirectory

PRIMARY_UID = "primary-uid"
SECONDARY_UID = "secondary-uid"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory) -> DocumentStore:
    return DocumentStore(session_factory)


@pytest.fixture
def directory() -> AdminDirectory:
    return AdminDirectory.from_uids([PRIMARY_UID], [SECONDARY_UID])


@pytest.fixture
def primary(directory):
    return directory.open_session(PRIMARY_UID, "primary@example.com")


@pytest.fixture
def secondary(directory):
    return directory.open_session(SECONDARY_UID, "secondary@example.com")


@pytest.fixture
def chapter(store, primary):
    from prep_admin.services.chapter_service import create_chapter, get_chapter

    chapter_id = create_chapter(
        store,
        primary,
        {"name": "Kinematics", "subject": "Physics", "skillTags": ["vectors", "projectile"]},
    )
    return get_chapter(store, chapter_id)


@pytest.fixture
def app(session_factory, directory, tmp_path: Path):
    from prep_admin.app import create_app

    return create_app(
        session_factory=session_factory,
        directory=directory,
        suggestions=SuggestionClient(api_key=""),
        uploads_dir=tmp_path / "uploads",
        bootstrap_enabled=True,
        background_cleanup=False,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
