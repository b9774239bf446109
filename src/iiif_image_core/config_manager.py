"""Settings for the interpreter tooling.

Values come from an optional `config.json` layered over `DEFAULTS`. Only
the pipeline, the logger and the CLI read them.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from .logger import get_logger

logger = get_logger(__name__)

DEFAULTS: dict[str, Any] = {
    "logging": {"level": "INFO", "dir": "logs"},
    # Threshold is the bitonal cut level (0-255)
    "pipeline": {"threshold": 128, "resample": "lanczos"},
    "cli": {"indent": 2},
}


def _layer(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _layer(base[key], value)
        else:
            base[key] = value
    return base


def config_file_candidates() -> list[Path]:
    """Locations searched for `config.json`, first match wins."""
    return [Path.cwd() / "config.json", Path.home() / ".iiif-image" / "config.json"]


@dataclass
class ConfigManager:
    """Dotted-path access to the layered settings."""

    path: Path | None = None
    settings: dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULTS))

    @classmethod
    def load(cls, path: Path | None = None) -> ConfigManager:
        """Layer `path` (or the first existing candidate) over the defaults.

        A missing or unreadable file leaves the defaults in place.
        """
        if path is None:
            path = next((p for p in config_file_candidates() if p.exists()), None)

        cm = cls(path=path)
        if path is None or not path.exists():
            return cm

        try:
            loaded = json.loads(path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", path, exc)
            return cm

        if isinstance(loaded, dict):
            _layer(cm.settings, loaded)
        return cm

    def get_setting(self, dotted_path: str, default: Any = None) -> Any:
        """Read e.g. `get_setting("pipeline.threshold", 128)`."""
        node: Any = self.settings
        for part in filter(None, dotted_path.split(".")):
            if not isinstance(node, dict):
                return default
            node = node.get(part)
        return default if node is None else node

    def set_setting(self, dotted_path: str, value: Any) -> None:
        *parents, leaf = [p for p in dotted_path.split(".") if p]
        node = self.settings
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]
        node[leaf] = value

    def get_logs_dir(self) -> Path:
        """Log directory from `logging.dir`, relative paths against the cwd."""
        path = Path(str(self.get_setting("logging.dir", "logs"))).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache(maxsize=1)
def get_config_manager() -> ConfigManager:
    """Get the process-wide config manager."""
    return ConfigManager.load()
