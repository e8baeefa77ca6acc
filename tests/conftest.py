import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="denuncia-api-tests-"))
TEST_DB_URL = os.getenv("TEST_DB_URL", f"sqlite:///{TEST_DB_DIR / 'test.sqlite'}")
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ["ENV"] = "development"
os.environ["TRUST_PROXY"] = "false"

from denuncia_api.core.config import settings
from denuncia_api.db.init_db import init_db
from denuncia_api.main import app


@pytest.fixture(autouse=True)
def _reset_state():
    init_db(drop_all=True)
    app.state.rate_limiters.general.reset()
    app.state.rate_limiters.submission.reset()
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def trust_proxy(monkeypatch):
    monkeypatch.setattr(settings, "TRUST_PROXY", True)


@pytest.fixture
def anyio_backend():
    return "asyncio"
