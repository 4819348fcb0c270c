from __future__ import annotations

import logging
from pathlib import Path

import pytest

from common.base.logging import ROOT_LOGGER_NAME
from common.shared.loader import CONFIG_ENV_VAR, PathSettings, clear_settings_cache


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> PathSettings:
    return PathSettings()


@pytest.fixture
def make_file(tmp_path: Path):
    def _make(name: str, content: str | bytes = "data") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    return _make


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logger._initialized = False  # type: ignore[attr-defined]
