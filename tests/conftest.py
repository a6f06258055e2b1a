import os
import sys
import tempfile
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# Config de test AVANT d'importer l'app (les settings sont lus à l'import)
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="blog-media-")
os.environ["MEDIA_BASE_URL"] = "http://testserver/media"

import pytest
from fastapi.testclient import TestClient

from blog_api.core.database import Base, SessionLocal, engine
from blog_api.core.security import create_access_token
from blog_api.core.storage import LocalObjectStore, get_object_store
from blog_api.main import app
from blog_api.models.user import User

MEDIA_BASE_URL = "http://testserver/media"


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(tmp_path):
    """Stockage objet dans un dossier temporaire"""
    return LocalObjectStore(tmp_path / "media", MEDIA_BASE_URL)


@pytest.fixture
def client(store):
    """Client de test FastAPI"""
    app.dependency_overrides[get_object_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.pop(get_object_store, None)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = SessionLocal()
    yield db
    db.close()


@pytest.fixture
def make_user():
    """Fabrique d'utilisateurs en base"""
    def _make_user(username: str = "alice", password: str = "password123") -> User:
        session = SessionLocal()
        user = User(email=f"{username}@example.com", username=username)
        user.set_password(password)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.close()
        return user
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def headers_for():
    """Headers Authorization pour un utilisateur"""
    return auth_headers
