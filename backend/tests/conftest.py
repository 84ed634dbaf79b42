import os
import sys
import tempfile
from decimal import Decimal
from pathlib import Path

# Add backend directory to Python path FIRST
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Keep the module-level engine and log files away from the user's home directory
os.environ.setdefault("PRODUCT_CATALOG_DATABASE_URL", "sqlite://")
os.environ.setdefault("PRODUCT_CATALOG_LOG_DIR", tempfile.mkdtemp(prefix="product-catalog-logs-"))

# Now import after path is set
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, create_database_engine, get_db
from models import Product
from repositories.unit_of_work import UnitOfWork


@pytest.fixture
def engine():
    """In-memory database shared by every session of one test"""
    engine = create_database_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Create in-memory database for testing"""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def uow(session_factory):
    unit_of_work = UnitOfWork(session_factory())
    yield unit_of_work
    unit_of_work.close()


@pytest.fixture
def make_product():
    """Build an unsaved product with sensible defaults"""
    def _make(name="Product", price="10.00", stock=1, **kwargs):
        return Product(name=name, price=Decimal(price), stock=stock, **kwargs)
    return _make


@pytest.fixture
def client(session_factory):
    """API client whose requests use the test database"""
    from main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
