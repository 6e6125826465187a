"""
Shared fixtures: a throwaway SQLite database per test and an app bound to it.
"""
import pytest
from fastapi.testclient import TestClient

from detection_platform.api_service import models  # noqa: F401  (registers tables)
from detection_platform.api_service.db import Base, create_db_engine, create_session_factory
from detection_platform.api_service.main import create_app


@pytest.fixture
def engine(tmp_path):
    test_engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def app(engine):
    return create_app(engine=engine)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c

