from __future__ import annotations

import os
import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient

# Environnement de test avant tout import de l'application (settings lus à l'import)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")

from babobamboo.core.database import Base, SessionLocal, engine  # noqa: E402
from babobamboo.core.security import create_access_token  # noqa: E402
from babobamboo.main import app  # noqa: E402
from babobamboo.models import Order, OrderItem, PaymentStatus, PriceType, Product  # noqa: E402
from babobamboo.models.user import AccountType  # noqa: E402
from babobamboo.repositories.language_repo import LanguageRepository  # noqa: E402
from babobamboo.repositories.user_repo import create_user  # noqa: E402


@pytest.fixture
def db():
    """Base SQLite en mémoire, recréée pour chaque test, langues en (défaut) et nl"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    languages = LanguageRepository(session)
    languages.create_language("en", "English", "English", is_default=True)
    languages.create_language("nl", "Dutch", "Nederlands")
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Client de test (sans lifespan : les tables viennent de la fixture db)"""
    yield TestClient(app)
    app.dependency_overrides.clear()


def _auth_headers(user) -> dict:
    token = create_access_token(subject=user.id, roles=[role.name for role in user.roles])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db):
    return create_user(db, "admin@babobamboo.com", "admin-password", full_name="Admin", roles=("admin",))


@pytest.fixture
def customer_user(db):
    return create_user(db, "customer@babobamboo.com", "customer-password", full_name="Client")


@pytest.fixture
def company_user(db):
    return create_user(db, "company@babobamboo.com", "company-password", full_name="Entreprise",
                       account_type=AccountType.COMPANY)


@pytest.fixture
def admin_headers(admin_user):
    return _auth_headers(admin_user)


@pytest.fixture
def customer_headers(customer_user):
    return _auth_headers(customer_user)


@pytest.fixture
def company_headers(company_user):
    return _auth_headers(company_user)


@pytest.fixture
def make_product(db):
    def _make(name: str = "Bamboo cup", name_nl: Optional[str] = None, price: str = "12.50",
              wholesale: Optional[str] = "9.00", is_active: bool = True) -> Product:
        product = Product(
            retail_price=Decimal(price),
            wholesale_price=Decimal(wholesale) if wholesale else None,
            is_active=is_active,
        )
        product.new_translation("en", name=name, description=f"{name} description")
        if name_nl:
            product.new_translation("nl", name=name_nl)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_order(db, make_product):
    def _make(products=None, user=None, email: Optional[str] = "client@babobamboo.com",
              token: Optional[str] = "auto", send_date: Optional[date] = None,
              sent: bool = False, used: bool = False) -> Order:
        products = products or [make_product()]
        order = Order(
            user_id=user.id if user is not None else None,
            full_name="Client Test",
            email=email,
            total_amount=Decimal("0"),
            payment_status=PaymentStatus.COMPLETED,
            rating_token=uuid.uuid4().hex if token == "auto" else token,
            send_rating_email_date=send_date,
            rating_email_sent=sent,
            rating_token_used=used,
        )
        for product in products:
            order.items.append(OrderItem(
                product_id=product.id,
                quantity=1,
                price=product.retail_price,
                price_type=PriceType.RETAIL,
            ))
        order.calculate_total()
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make
