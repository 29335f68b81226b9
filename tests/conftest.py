from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Makes the tagwallet package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tagwallet.app import create_app  # noqa: E402
from tagwallet.core import config as core_config  # noqa: E402
from tagwallet.core.rate_limiter import reset_rate_limits  # noqa: E402
from tagwallet.db import models  # noqa: E402
from tagwallet.db import session as db_session  # noqa: E402
from tagwallet.rewards_app import create_rewards_app  # noqa: E402

TEST_SECRET = "test-secret"


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def db_env(tmp_path, monkeypatch):
    """Temporary SQLite database and uploads dir, with settings/engine caches reset."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("JWT_SECRET", TEST_SECRET)
    monkeypatch.delenv("AUTH_RATE_LIMIT", raising=False)
    monkeypatch.delenv("TRUST_PROXY", raising=False)
    _clear_caches()
    reset_rate_limits()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield tmp_path

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()
    reset_rate_limits()


@pytest.fixture()
def auth_client(db_env):
    with TestClient(create_app()) as client:
        yield client


@pytest.fixture()
def rewards_client(db_env):
    with TestClient(create_rewards_app()) as client:
        yield client


@pytest.fixture()
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), "red").save(buffer, format="PNG")
    return buffer.getvalue()
