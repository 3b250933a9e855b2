"""Pytest fixtures for storefront tests."""

import os

#must be in place before anything under storefront reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from storefront.api import create_app
from storefront.data import models
from storefront.data.database import Base, build_engine, get_db
from storefront.errors import GatewayError
from storefront.services.lock_service import get_lock_service
from storefront.services.payment_gateway import get_gateway_client
from storefront.services.signup_store import get_signup_store


class FakeLockService:
    """In-process stand-in for the Redis lock: same owner semantics, no TTL."""

    def __init__(self):
        self.locks = {}
        self.released = []

    def acquire_checkout_lock(self, user_id, owner, ttl=30):
        key = f"checkout:{user_id}:lock"
        if key in self.locks:
            return False
        self.locks[key] = owner
        return True

    def release_checkout_lock(self, user_id, owner):
        key = f"checkout:{user_id}:lock"
        if self.locks.get(key) != owner:
            return False
        del self.locks[key]
        self.released.append(key)
        return True


class FakeGateway:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def create_order(self, options):
        self.calls.append(options)
        if self.fail:
            raise GatewayError("Failed to create payment gateway order")
        return {"id": f"order_gw_{len(self.calls)}", "status": "created", **options}


class FakeSignupStore:
    def __init__(self):
        self.sessions = {}

    def save(self, session, ttl):
        self.sessions[session.token] = session

    def get(self, token):
        return self.sessions.get(token)

    def delete(self, token):
        self.sessions.pop(token, None)


class Factory:
    """Builds committed rows for a test."""

    def __init__(self, db):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def user(self, name="Asha", email=None, wallet_balance="0", status="Active"):
        return self._save(
            models.UserModel(name=name, email=email, wallet_balance=Decimal(wallet_balance), status=status)
        )

    def address(self, user, city="Kochi", is_default=False, **kw):
        return self._save(
            models.AddressModel(
                user_id=user.id,
                location=kw.pop("location", "MG Road"),
                city=city,
                state=kw.pop("state", "Kerala"),
                zip=kw.pop("zip", "682001"),
                is_default=is_default,
                **kw,
            )
        )

    def category(self, name="Phones", is_active=True):
        return self._save(models.CategoryModel(name=name, is_active=is_active))

    def product(self, category, name="Pixel", price="100", stock=10, **kw):
        return self._save(
            models.ProductModel(
                name=name,
                category_id=category.id,
                price=Decimal(price),
                stock=stock,
                is_out_of_stock=stock <= 0,
                is_active=kw.pop("is_active", True),
                popularity=kw.pop("popularity", 0),
                **kw,
            )
        )

    def offer(self, target, discount_type="percentage", discount_value="10", max_discount_value=None, **kw):
        now = datetime.now(timezone.utc)
        is_product = isinstance(target, models.ProductModel)
        offer = self._save(
            models.OfferModel(
                kind="product" if is_product else "category",
                product_id=target.id if is_product else None,
                category_id=None if is_product else target.id,
                discount_type=discount_type,
                discount_value=Decimal(discount_value),
                max_discount_value=Decimal(max_discount_value) if max_discount_value else None,
                valid_from=kw.pop("valid_from", now - timedelta(days=1)),
                valid_until=kw.pop("valid_until", now + timedelta(days=1)),
                status=kw.pop("status", "active"),
            )
        )
        target.offer_id = offer.id
        self.db.commit()
        return offer

    def coupon(self, code="SAVE10", discount_type="percentage", discount_value="10", **kw):
        now = datetime.now(timezone.utc)
        max_discount = kw.pop("max_discount_value", None)
        return self._save(
            models.CouponModel(
                code=code,
                discount_type=discount_type,
                discount_value=Decimal(discount_value),
                max_discount_value=Decimal(max_discount) if max_discount else None,
                min_cart_value=Decimal(kw.pop("min_cart_value", "0")),
                valid_from=kw.pop("valid_from", now - timedelta(days=1)),
                valid_until=kw.pop("valid_until", now + timedelta(days=1)),
                usage_limit=kw.pop("usage_limit", None),
                times_used=kw.pop("times_used", 0),
                is_active=kw.pop("is_active", True),
            )
        )

    def order(self, user, final_total="250", status="Pending", **kw):
        return self._save(
            models.OrderModel(
                user_id=user.id,
                name="Asha",
                mobile="9999999999",
                location="MG Road",
                city="Kochi",
                state="Kerala",
                zip="682001",
                shipping_charge=Decimal("0"),
                total_amount=Decimal(kw.pop("total_amount", final_total)),
                discount_applied=Decimal(kw.pop("discount_applied", "0")),
                final_total=Decimal(final_total),
                status=status,
                is_cancelled=kw.pop("is_cancelled", False),
                payment_method=kw.pop("payment_method", None),
                created_at=kw.pop("created_at", None) or datetime.now(timezone.utc),
            )
        )

    def order_item(self, order, product, quantity=1):
        return self._save(models.OrderItemModel(order_id=order.id, product_id=product.id, quantity=quantity))


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=True, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def signup_store():
    return FakeSignupStore()


SHIPPING = {
    "name": "Asha",
    "mobile": "9999999999",
    "alternate_mobile": None,
    "location": "MG Road",
    "city": "Kochi",
    "state": "Kerala",
    "landmark": "Near the park",
    "zip": "682001",
}


@pytest.fixture
def shipping():
    return dict(SHIPPING)


@pytest.fixture
def client(session_factory, lock_service, gateway, signup_store):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_gateway_client] = lambda: gateway
    app.dependency_overrides[get_signup_store] = lambda: signup_store

    with TestClient(app) as client:
        yield client
