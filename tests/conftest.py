import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from config import Config
from extensions import db
from models import User, Role


@pytest.fixture()
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = "test-secret"
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'campus.db'}"
        CORS_ORIGIN = "http://frontend.test"
        SEED_ENABLED = True

    app = create_app(TestConfig)
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin(app):
    with app.app_context():
        db.session.add(User(
            name="Admin",
            enrollment="ADM1",
            email="admin@x.com",
            password_hash=generate_password_hash("secret"),
            role=Role.ADMIN.value,
        ))
        db.session.commit()
    return {"enrollment": "ADM1", "password": "secret"}


@pytest.fixture()
def admin_client(app, admin):
    c = app.test_client()
    r = c.post("/api/login", json=admin)
    assert r.status_code == 200
    return c


def signup(client, **overrides):
    body = {"name": "A", "enrollment": "E1", "email": "a@x.com", "password": "p"}
    body.update(overrides)
    return client.post("/api/signup", json=body)
