import os

# Point the application engine at a throwaway database before app modules load
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_product_service
from app.database import Base
from app.models.category import Category
from app.models.user import User
from app.services.product_service import ProductService
from app.utils.mapper import ProductMapper


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_product_service():
    """Override service dependency to use the test database."""
    return ProductService(ProductMapper(), TestingSessionLocal)


# Override the dependency
app.dependency_overrides[get_product_service] = override_get_product_service


@pytest.fixture(scope="function")
def tables():
    """Create tables for a test and drop them afterwards."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def refs(tables):
    """Seed the users and categories products can reference."""
    with TestingSessionLocal() as db:
        db.add_all([
            User(id=1, username="alice", email="alice@example.com"),
            User(id=2, username="bob", email="bob@example.com"),
            Category(id=1, name="Electronics"),
            Category(id=2, name="Books"),
        ])
        db.commit()
    return {"user_id": 1, "other_user_id": 2, "category_id": 1, "other_category_id": 2}


@pytest.fixture(scope="function")
def client(refs):
    """Create test client with fresh, seeded database for each test."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def service(refs):
    """ProductService bound to the test database."""
    return ProductService(ProductMapper(), TestingSessionLocal)


@pytest.fixture
def product_payload(refs):
    """Factory for valid product creation payloads."""
    def make(**overrides):
        payload = {
            "name": "Test Product",
            "display_name": "Test Product Display",
            "description": "A product used in tests",
            "price": 99.99,
            "stock": 10,
            "category_id": refs["category_id"],
            "user_id": refs["user_id"],
        }
        payload.update(overrides)
        return payload
    return make


@pytest.fixture(scope="function")
def db_session(refs):
    """Create database session for direct database access in tests."""
    session = TestingSessionLocal()

    yield session

    session.close()
