"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database. External collaborators
(identity provider, object storage, redis lock, celery notifications) are
replaced with in-process fakes through FastAPI dependency overrides.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["PAYMENT_WEBHOOK_SECRET"] = "payment-secret"

from contextlib import contextmanager
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storefront.data.models  # noqa: F401
from storefront.api.deps import (
    get_identity_client,
    get_lock_service,
    get_notification_service,
    get_storage_client,
)
from storefront.data.database import Base, enable_sqlite_foreign_keys, get_db
from storefront.data.models.cart import CartModel
from storefront.data.models.product import ProductModel
from storefront.data.models.user import UserModel, ROLE_ADMIN
from storefront.domain.errors import Conflict, Unauthenticated, UpstreamFailure
from storefront.main import app
from storefront.services.storage_client import image_name_from_url

DESCRIPTION = "A solid piece of furniture that will look great in any room of your home."


class FakeLockService:
    def __init__(self):
        self.held = set()
        self.acquired = []

    @contextmanager
    def cart_lock(self, user_id):
        if user_id in self.held:
            raise Conflict("Another cart operation is in progress")
        self.held.add(user_id)
        self.acquired.append(user_id)
        try:
            yield
        finally:
            self.held.discard(user_id)


class FakeStorageClient:
    def __init__(self):
        self.uploaded = []
        self.deleted = []
        self.fail_uploads = False

    def upload(self, filename, content, content_type):
        if self.fail_uploads:
            raise UpstreamFailure("Image upload failed")
        name = f"{len(self.uploaded) + 1}-{filename}"
        self.uploaded.append(name)
        return f"https://storage.test/storage/v1/object/public/main-bucket/{name}"

    def delete(self, url):
        self.deleted.append(image_name_from_url(url))
        return True


class FakeIdentityClient:
    """Any token is a user id, except 'invalid'."""

    def fetch_profile(self, token):
        if token == "invalid":
            raise Unauthenticated("Invalid or expired session")
        return {"id": token, "email": f"{token}@example.com", "image_url": None}


class FakeNotificationService:
    def __init__(self):
        self.sent = []

    def send_order_placed(self, user_id, order_id, email):
        self.sent.append((user_id, order_id, email))


@pytest.fixture
def engine():
    engine = enable_sqlite_foreign_keys(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def storage():
    return FakeStorageClient()


@pytest.fixture
def notifications():
    return FakeNotificationService()


@pytest.fixture
def client(session_factory, lock_service, storage, notifications):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_storage_client] = lambda: storage
    app.dependency_overrides[get_identity_client] = lambda: FakeIdentityClient()
    app.dependency_overrides[get_notification_service] = lambda: notifications

    yield TestClient(app)

    app.dependency_overrides.clear()


def auth(user_id="alice"):
    return {"Authorization": f"Bearer {user_id}"}


def payment_step(secret="payment-secret"):
    return {"X-Payment-Secret": secret}


@pytest.fixture
def make_user(db_session):
    def _make(user_id="alice", role="customer"):
        user = db_session.get(UserModel, user_id)
        if user is None:
            user = UserModel(id=user_id, email=f"{user_id}@example.com", role=role)
            db_session.add(user)
        user.role = role
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_admin(make_user):
    def _make(user_id="admin"):
        return make_user(user_id, role=ROLE_ADMIN)

    return _make


@pytest.fixture
def make_product(db_session):
    def _make(name="chic chair", price="10.00", company="Luxora", featured=False):
        product = ProductModel(
            name=name,
            company=company,
            price=Decimal(price),
            description=DESCRIPTION,
            image=f"https://storage.test/storage/v1/object/public/main-bucket/{name.replace(' ', '-')}.jpg",
            featured=featured,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def make_cart(db_session):
    def _make(user_id="alice", tax_rate="0.06", shipping="5.00"):
        cart = CartModel(
            user_id=user_id,
            tax_rate=Decimal(tax_rate),
            shipping=Decimal(shipping),
            version=1,
        )
        db_session.add(cart)
        db_session.commit()
        return cart

    return _make
