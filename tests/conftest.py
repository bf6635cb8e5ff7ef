import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("DEBUG", "False")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from thisorthat.api.deps import get_auth_provider, get_db
from thisorthat.client.http import ApiClient
from thisorthat.core.auth import AuthUser
from thisorthat.core.database import Base
from thisorthat.core.exceptions import AuthRequired
from thisorthat.models.answer import Answer
from thisorthat.models.game import Game
from thisorthat.models.player import Player
from thisorthat.models.question import Question
from main import app

HOST_TOKEN = "host-token"
OTHER_TOKEN = "other-token"


class FakeAuthProvider:
    """Stands in for the hosted auth provider with two known sessions."""

    users = {
        HOST_TOKEN: AuthUser(id="host-1", email="host@example.com"),
        OTHER_TOKEN: AuthUser(id="host-2", email="other@example.com"),
    }

    def get_user(self, token):
        user = self.users.get(token)
        if user is None:
            raise AuthRequired("Invalid or expired token")
        return user


@pytest.fixture(scope="session")
def test_db():
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def db_session(test_db):
    session = test_db()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(autouse=True)
def db_cleanup(db_session):
    for model in [Answer, Player, Question, Game]:
        db_session.query(model).delete()
    db_session.commit()


@pytest.fixture
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_provider] = FakeAuthProvider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def host_headers():
    return {"Authorization": f"Bearer {HOST_TOKEN}"}


@pytest.fixture
def other_headers():
    return {"Authorization": f"Bearer {OTHER_TOKEN}"}


@pytest.fixture
def api(client):
    return ApiClient(base_url="http://testserver", http=client)


def game_payload(**overrides):
    payload = {
        "title": "Baby Shower",
        "slug": "baby-shower",
        "option_a_label": "Mom",
        "option_b_label": "Dad",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_game(client, host_headers):
    def _make(questions=(), **overrides):
        response = client.post("/api/admin/games", json=game_payload(**overrides), headers=host_headers)
        assert response.status_code == 201, response.text
        game = response.json()
        for prompt, correct in questions:
            r = client.post(
                f"/api/admin/games/{game['id']}/questions",
                json={"prompt": prompt, "correct_answer": correct},
                headers=host_headers
            )
            assert r.status_code == 201, r.text
        return game
    return _make


@pytest.fixture
def game_form():
    return game_payload
