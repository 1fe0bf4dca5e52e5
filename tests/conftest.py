"""Test configuration helpers."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterator

import pytest

# Declared explicitly so ``@pytest.mark.anyio`` works even when plugin
# auto-discovery is disabled via ``PYTEST_DISABLE_PLUGIN_AUTOLOAD``.
pytest_plugins = ("anyio",)

# Ensure the repository root is importable so ``import core`` and the other
# absolute imports resolve when tests run from arbitrary working directories.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("STORAGE_ACCESS_KEY", "test-access-key")
os.environ.setdefault("STORAGE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("STORAGE_BUCKET", "test-bucket")
os.environ.setdefault("PASSWORD", "letmein")

_SETTINGS_ENV_KEYS = (
    "STORAGE_BUCKET",
    "STORAGE_REGION",
    "STORAGE_ACCESS_KEY",
    "STORAGE_SECRET_KEY",
    "STORAGE_URL",
    "STORAGE_MAX_SIZE",
    "PASSWORD",
    "UPLOAD_TEMP_DIR",
    "UPLOAD_MAX_BODY_SIZE",
    "UPLOAD_MAX_FIELD_SIZE",
    "UPLOAD_DEFAULT_LINK_EXPIRY",
    "PORT",
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def staging_root(tmp_path: Path) -> Path:
    root = tmp_path / "staging"
    root.mkdir()
    return root


@pytest.fixture
def clean_env(monkeypatch) -> Iterator[None]:
    """Remove every variable read by ``Settings.from_env``."""

    for key in _SETTINGS_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
