import os

# Must be set before storefront.core.config is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest

from storefront import db as database
from storefront.app import create_app
from storefront.models import Product
from storefront.services import users

PASSWORD = "correct-horse-1"


@pytest.fixture
def app():
    app = create_app("sqlite://")
    app.config["TESTING"] = True
    database.create_all()
    yield app
    database.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    session = database.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    """Register an account and return (user, session_token)."""
    counter = {"n": 0}

    def _make(role="customer", email=None, name="Ama Mensah"):
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@example.com"
        result = users.register(db, email, PASSWORD, name)
        user = result["user"]
        if role == "admin":
            user.role = "admin"
            db.commit()
        return user, result["session_token"]

    return _make


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", name="Store Admin")


@pytest.fixture
def make_product(db):
    def _make(price=10000, status="active", slug="sample-product", category_ids=None, **extra):
        product = Product(
            name=extra.pop("name", "Sample product"),
            slug=slug,
            description="A product used in tests.",
            price=price,
            status=status,
            stock=extra.pop("stock", 5),
            images=[],
            category_ids=category_ids or [],
            **extra,
        )
        db.add(product)
        db.commit()
        return product

    return _make


def auth(token):
    return {"X-Session-Token": token}
