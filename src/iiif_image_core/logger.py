from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOGGER_NAMESPACE = "iiif_image"


def _get_configured_log_level() -> str:
    try:
        from .config_manager import get_config_manager

        level = get_config_manager().get_setting("logging.level", "INFO")
        return str(level or "INFO").upper()
    except (ImportError, OSError, ValueError, RuntimeError):
        return "INFO"


def _get_logs_dir() -> Path:
    try:
        from .config_manager import get_config_manager

        return get_config_manager().get_logs_dir()
    except (ImportError, OSError, ValueError, RuntimeError):
        return Path("logs")


# Resolved lazily on first setup so importing the package never touches disk
LOG_BASE_DIR: Path | None = None

CONSOLE_FORMAT = logging.Formatter("%(levelname)s | %(name)s | %(message)s")

FILE_FORMAT = logging.Formatter(
    "%(asctime)s [%(levelname)s] [%(name)s.%(funcName)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app_logger = logging.getLogger(LOGGER_NAMESPACE)
app_logger.propagate = True


def _ensure_logs_dir() -> Path:
    global LOG_BASE_DIR
    if LOG_BASE_DIR is None:
        LOG_BASE_DIR = _get_logs_dir()
    try:
        LOG_BASE_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Fall back to CWD logs if configured path isn't writable
        LOG_BASE_DIR = Path("logs")
        LOG_BASE_DIR.mkdir(parents=True, exist_ok=True)
    return LOG_BASE_DIR


def setup_logging(console: bool = True):
    """Set up the 'iiif_image' logger with a console handler and daily file rotation."""
    log_level = _get_configured_log_level()
    effective_level = getattr(logging, log_level, logging.INFO)

    if app_logger.handlers:
        if app_logger.level != effective_level:
            app_logger.setLevel(effective_level)
            for h in app_logger.handlers:
                h.setLevel(effective_level)
        return

    app_logger.setLevel(effective_level)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(CONSOLE_FORMAT)
        console_handler.setLevel(effective_level)
        app_logger.addHandler(console_handler)

    log_file = _ensure_logs_dir() / "iiif_image.log"
    try:
        file_handler = TimedRotatingFileHandler(log_file, when="midnight", interval=1, backupCount=30, encoding="utf-8")
        file_handler.setFormatter(FILE_FORMAT)
        file_handler.setLevel(effective_level)
        app_logger.addHandler(file_handler)
    except OSError as e:
        sys.stderr.write(f"FAILED TO SETUP FILE LOGGING: {e}\n")
        app_logger.error("Failed to setup file logging: %s", e, exc_info=True)

    app_logger.debug("Logging initialized (Level: %s) -> %s", log_level, log_file)


def get_logger(name: str):
    """Get a logger within the 'iiif_image' namespace.

    Handlers are attached by `setup_logging`, which entry points call; library
    use without it falls through to the root logger.
    """
    if name != LOGGER_NAMESPACE and not name.startswith(f"{LOGGER_NAMESPACE}."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)
