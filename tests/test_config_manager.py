from __future__ import annotations

import json
from pathlib import Path

import pytest

from iiif_image_core.config_manager import DEFAULTS, ConfigManager


def _write(tmp_path: Path, payload) -> Path:
    cfg = tmp_path / "config.json"
    cfg.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return cfg


def test_defaults_without_a_file(tmp_path: Path):
    cm = ConfigManager.load(path=tmp_path / "missing.json")
    assert cm.get_setting("logging.level") == "INFO"
    assert cm.get_setting("pipeline.threshold") == 128
    assert cm.get_setting("pipeline.resample") == "lanczos"
    assert cm.get_setting("missing.key", "fallback") == "fallback"
    assert not (tmp_path / "missing.json").exists()


def test_file_values_are_layered_over_defaults(tmp_path: Path):
    cm = ConfigManager.load(path=_write(tmp_path, {"pipeline": {"threshold": 90}}))
    assert cm.get_setting("pipeline.threshold") == 90
    # Siblings from the defaults survive the merge
    assert cm.get_setting("pipeline.resample") == "lanczos"


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", ""])
def test_unusable_file_falls_back_to_defaults(tmp_path: Path, payload):
    cm = ConfigManager.load(path=_write(tmp_path, payload))
    assert cm.get_setting("pipeline.threshold") == 128


def test_set_setting_creates_nested_keys(tmp_path: Path):
    cm = ConfigManager.load(path=tmp_path / "missing.json")
    cm.set_setting("cli.indent", 4)
    cm.set_setting("custom.nested.value", "x")
    assert cm.get_setting("cli.indent") == 4
    assert cm.get_setting("custom.nested.value") == "x"


def test_instances_do_not_share_defaults(tmp_path: Path):
    cm = ConfigManager.load(path=tmp_path / "missing.json")
    cm.set_setting("pipeline.threshold", 1)
    assert DEFAULTS["pipeline"]["threshold"] == 128
    assert ConfigManager().get_setting("pipeline.threshold") == 128


def test_logs_dir_is_created(tmp_path: Path):
    cm = ConfigManager.load(path=tmp_path / "missing.json")
    cm.set_setting("logging.dir", str(tmp_path / "my-logs"))
    logs = cm.get_logs_dir()
    assert logs == tmp_path / "my-logs"
    assert logs.is_dir()
