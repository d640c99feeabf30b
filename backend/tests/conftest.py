import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.db import build_engine, get_db, init_db
from storefront.main import app
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import VariantRepository


@pytest.fixture
def engine():
    eng = build_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_variant(db):
    counter = {"n": 0}

    def _make(stock=10, price_cents=500, track_inventory=True, allow_backorder=False, name=None):
        counter["n"] += 1
        n = counter["n"]
        v = VariantRepository(db).create_or_update(
            sku=f"SKU-{n:03d}",
            name=name or f"Size {n}",
            product_name="Cold Brew",
            price_cents=price_cents,
            stock_quantity=stock,
            track_inventory=track_inventory,
            allow_backorder=allow_backorder,
        )
        db.commit()
        return v

    return _make


@pytest.fixture
def make_cart(db):
    def _make(user_id=None):
        cart = CartRepository(db).create_cart(user_id=user_id)
        db.commit()
        return cart

    return _make


@pytest.fixture
def client(session_factory):
    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
