"""
Test configuration and fixtures for the link redirector.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from main import app
from shortlink_app.database.connection import Base, create_db_engine, get_db
from shortlink_app.dependencies import get_visit_recorder
from shortlink_app.recorder import VisitRecorder

# Test database configuration (file based so recorder threads share it)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        # Cleanup
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def visit_recorder(db_session):
    """
    Recorder writing into the test database.
    Shut down before the tables are dropped.
    """
    recorder = VisitRecorder(session_factory=TestingSessionLocal, max_workers=2)
    yield recorder
    recorder.shutdown(timeout=5)


@pytest.fixture(scope="function")
def client(db_session, visit_recorder):
    """
    Create a test client with database and recorder dependencies overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    # Override the dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_visit_recorder] = lambda: visit_recorder

    # Create test client
    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def session_factory(db_session):
    """Session factory bound to the test database (tables already created)"""
    return TestingSessionLocal
