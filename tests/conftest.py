"""Test bootstrap.

Ensures the sources are importable and redirects logging and config to a
temporary folder for every test.
"""

from __future__ import annotations

import contextlib
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _reset_handlers():
    from iiif_image_core import logger as logger_mod

    for handler in list(logger_mod.app_logger.handlers):
        logger_mod.app_logger.removeHandler(handler)
        with contextlib.suppress(Exception):
            handler.close()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Point the config singleton and the log directory at `tmp_path`."""
    from iiif_image_core import logger as logger_mod
    from iiif_image_core.config_manager import ConfigManager, get_config_manager

    get_config_manager.cache_clear()
    cm = ConfigManager.load(path=tmp_path / "config.json")
    cm.set_setting("logging.dir", str(tmp_path / "logs"))
    monkeypatch.setattr("iiif_image_core.config_manager.get_config_manager", lambda: cm)
    monkeypatch.setattr("iiif_image_core.pipeline.get_config_manager", lambda: cm)
    monkeypatch.setattr("iiif_image_cli.cli.get_config_manager", lambda: cm)

    _reset_handlers()
    monkeypatch.setattr(logger_mod, "LOG_BASE_DIR", tmp_path / "logs")

    yield cm

    _reset_handlers()
    get_config_manager.cache_clear()


@pytest.fixture
def config(_isolated_environment):
    return _isolated_environment
