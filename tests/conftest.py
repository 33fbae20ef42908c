"""
Root conftest.py for burritos webapp tests.

Provides a temporary data tree (MAIN_DIR), a temporary analysis root
(ANALYSIS_DIR) with the configuration documents, and TestClient fixtures
wired to them through ``app.dependency_overrides``.
"""

import json
import sys
from pathlib import Path

import bcrypt
import pytest

# Ensure the webapp root is in the path
webapp_root = Path(__file__).parent.parent
if str(webapp_root) not in sys.path:
    sys.path.insert(0, str(webapp_root))

from api.settings import Settings, get_settings

ACQUISITION = "data-2025-05-14_10-30-00.json"
OTHER_ACQUISITION = "data-2025-05-14_11-00-00.json"

USER_LOGIN = "alpha"
USER_PASSWORD = "burritos"
JWT_SECRET = "test-secret-with-enough-bytes-for-hs256"


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "subprocess: mark test as spawning a real child process",
    )


# ============================================================================
# Data fixtures
# ============================================================================


def acquisition_document() -> dict:
    """A minimal acquisition document with two detectors."""
    return {
        "PDS": {"area": 1.234567, "fwhm": 12.5, "peak": 0.5, "rise": 3.25, "time peak": 101.0},
        "PMT11": {"area": 2.0, "fwhm": 8.0, "peak": 0.125, "rise": 1.5, "time peak": 99.5},
    }


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    root = tmp_path / "eos"
    root.mkdir()
    return root


@pytest.fixture
def day_dir(data_root: Path) -> Path:
    """``2025/05/14`` populated with one acquisition and its derived files."""
    day = data_root / "2025" / "05" / "14"
    (day / "JSON").mkdir(parents=True)
    (day / "JSON" / ACQUISITION).write_text(json.dumps(acquisition_document()), encoding="utf-8")

    (day / "PDS").mkdir()
    (day / "PDS" / "data-2025-05-14_10-30-00.txt").write_text("time amplitude\n0 0.1\n1 0.2\n", encoding="utf-8")
    (day / "PDS" / "data-2025-05-14_10-30-00.png").write_bytes(b"\x89PNG\r\n\x1a\nPDS")

    (day / "Together").mkdir()
    (day / "Together" / "Together-2025-05-14_10-30-00.png").write_bytes(b"\x89PNG\r\n\x1a\nTOGETHER")
    (day / "Same").mkdir()
    (day / "Same" / "Same-2025-05-14_10-30-00.png").write_bytes(b"\x89PNG\r\n\x1a\nSAME")
    return day


@pytest.fixture
def analysis_root(tmp_path: Path) -> Path:
    """Analysis root with the three configuration documents and a latest marker."""
    root = tmp_path / "analysis"
    configurations = root / "configurations"
    configurations.mkdir(parents=True)
    documents = {
        "configuration.json": {"config": "positrons", "fit": False, "channels": {"PDS": 1}},
        "default_config_positrons.json": {"config": "positrons", "fit": False},
        "default_config_antiprotons.json": {"config": "antiprotons", "fit": True},
        "latest.json": {"latest": "2025-05-14_10-30-00", "particle": "positrons"},
    }
    for name, document in documents.items():
        (configurations / name).write_text(json.dumps(document, indent=2), encoding="utf-8")
    return root


@pytest.fixture
def settings(data_root: Path, analysis_root: Path) -> Settings:
    return Settings(
        main_dir=data_root,
        analysis_dir=analysis_root,
        python_path=sys.executable,
        analysis_script=analysis_root / "analysis.py",
    )


@pytest.fixture
def auth_settings(settings: Settings) -> Settings:
    password_hash = bcrypt.hashpw(USER_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4))
    settings.jwt_secret = JWT_SECRET
    settings.user_login = USER_LOGIN
    settings.user_password_hash = password_hash.decode("utf-8")
    return settings


# ============================================================================
# Client fixtures
# ============================================================================


def _client_for(settings: Settings):
    from fastapi.testclient import TestClient
    from main import app

    app.dependency_overrides[get_settings] = lambda: settings
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(settings: Settings):
    """TestClient with authentication disabled."""
    yield from _client_for(settings)


@pytest.fixture
def auth_client(auth_settings: Settings):
    """TestClient with single-user login configured."""
    yield from _client_for(auth_settings)
