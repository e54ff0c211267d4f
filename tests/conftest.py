"""Shared pytest fixtures for the trek CMS API tests."""

from typing import Generator

import pytest

from api import create_app
from models import storage
from models.credential_store import CredentialStore
from utils.image_host import ImageHostError
from utils.security import hash_password

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct"


class FakeImageHost:
    """Records image host calls instead of talking to Cloudinary."""

    def __init__(self):
        self.destroyed = []
        self.uploaded = []
        self.fail = False

    def upload(self, file):
        if self.fail:
            raise ImageHostError("host unavailable")
        self.uploaded.append(file.read())
        return {
            "url": "https://res.cloudinary.com/test-cloud/image/upload/v1/trekking/new.jpg",
            "publicId": "trekking/new",
            "width": 1200,
            "height": 800,
        }

    def destroy(self, public_id):
        if self.fail:
            raise ImageHostError("host unavailable")
        self.destroyed.append(public_id)
        return {"result": "ok"}


@pytest.fixture
def app():
    """Flask app on a fresh in-memory SQLite database."""
    app = create_app("testing")
    app.extensions["image_host"] = FakeImageHost()
    yield app
    storage.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def image_host(app) -> FakeImageHost:
    return app.extensions["image_host"]


@pytest.fixture
def credentials(app) -> CredentialStore:
    return CredentialStore(storage)


@pytest.fixture
def admin(credentials):
    """The seeded admin whose password is 'correct'."""
    return credentials.create(
        full_name="Site Admin",
        username=ADMIN_USERNAME,
        email="admin@example.com",
        password_hash=hash_password(ADMIN_PASSWORD),
    )


@pytest.fixture
def access_token(client, admin) -> str:
    response = client.post("/api/auth/sign-in", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return response.get_json()["accessToken"]


@pytest.fixture
def auth_headers(access_token) -> dict:
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
def region(client, auth_headers) -> Generator[dict, None, None]:
    response = client.post(
        "/api/trekking",
        json={
            "name": "Annapurna Region",
            "description": "Classic Himalayan treks.",
            "image": "https://res.cloudinary.com/test-cloud/image/upload/v17/trekking/annapurna.jpg",
            "keywords": [" himalaya ", "nepal"],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    yield response.get_json()["data"]
