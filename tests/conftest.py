import os

# Point the app at SQLite before storefront.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_DEMO_PRODUCTS", "false")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.database import Base, get_db
from storefront.main import app
from storefront.models import Product


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def products(db):
    """Two products: a keyboard at 10.00 and a mouse at 2.50"""
    keyboard = Product(id="p1", name="Keyboard", price=Decimal("10.00"), description="Mechanical", image_url="http://img/k.png", stock=5)
    mouse = Product(id="p2", name="Mouse", price=Decimal("2.50"), description="Wireless", image_url="http://img/m.png", stock=10)
    db.add_all([keyboard, mouse])
    db.commit()
    return {"keyboard": keyboard, "mouse": mouse}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
