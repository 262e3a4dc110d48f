"""Logging setup for the study assistant API.

Every module logs through ``logging.getLogger(__name__)``. This module
only decides levels and the fallback console handler; the per-category
levels come from Settings (``log_level_sql``, ``log_level_llm`` ...), so
retry chatter or SQL echo can be turned up without touching the rest.

Usage:
    from study_assistant.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from study_assistant.config import Settings, get_settings

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field -> logger names it controls
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_llm": (
        "study_assistant.infrastructure.http",
        "study_assistant.infrastructure.llm",
    ),
    "log_level_metrics": (
        "study_assistant.application.services.performance_metrics",
        "study_assistant.application.services.tracked_completion",
    ),
}


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply root and per-category log levels.

    Returns:
        The level set on each configured logger name ("" is the root).
    """
    settings = settings or get_settings()
    applied: dict[str, int] = {"": _parse_level(settings.log_level)}

    root = logging.getLogger()
    root.setLevel(applied[""])
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)

    for field_name, logger_names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug(
        "Log levels: %s",
        ", ".join(f"{name or 'root'}={logging.getLevelName(lvl)}" for name, lvl in applied.items()),
    )
    return applied


def _parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names mean INFO."""
    numeric = logging.getLevelName(raw.strip().upper())
    return numeric if isinstance(numeric, int) else logging.INFO
