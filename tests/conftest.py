import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
import uuid
from sqlalchemy.orm import sessionmaker
from app.core.config import settings
from app.core.database import Base, build_engine, get_db
from app.models import lesson as lesson_models  # noqa: F401
from app.schemas.token import Actor
import main
from tests.helpers.tokens import make_token
from fastapi.testclient import TestClient

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    engine = build_engine(test_db_url)
    yield engine
    engine.dispose()
    if test_db_url.startswith("sqlite"):
        if os.path.exists("./test.db"):
            os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    Base.metadata.create_all(bind=database_engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=database_engine)

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()

@pytest.fixture
def admin_id() -> str:
    return f"user_{uuid.uuid4().hex[:12]}"

@pytest.fixture
def admin_token(admin_id) -> str:
    return make_token(admin_id)

@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}

@pytest.fixture
def actor(admin_id) -> Actor:
    return Actor(id=admin_id)

@pytest.fixture
def lesson_payload():
    """Factory for request bodies; curriculum placement unless grade is given."""
    def _lesson_payload(**overrides):
        if "grade" in overrides:
            body = {"title": "Kinematics", "subject": "Physics", "grade": overrides.pop("grade")}
        else:
            body = {
                "title": "Les forces",
                "subject": "Physique",
                "level": "Lycée",
                "year": "1ère année",
                "chapter": "Mécanique",
                "lessonType": "Cours",
                "order": 1,
            }
        body.update(overrides)
        return body
    return _lesson_payload
