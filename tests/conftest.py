import pytest
from fastapi.testclient import TestClient

from roster.config import AppConfig, DatabaseConfig
from roster.domain.db import Store
from server.main import create_app


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "roster.db"


@pytest.fixture
def store(db_path):
    s = Store(db_path)
    s.init_database()
    yield s
    s.close()


@pytest.fixture
def client(db_path):
    app = create_app(AppConfig(database=DatabaseConfig(path=str(db_path))))
    with TestClient(app) as c:
        yield c
