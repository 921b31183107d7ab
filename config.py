"""Application configuration — environment variables and derived constants.

Loads ``BOT_TOKEN``, ``API_HOST``, ``HTTP_TIMEOUT``, ``POLL_TIMEOUT``,
``RUN_COMMANDS`` and ``LOG_LEVEL`` from the environment via
``python-dotenv``.  All values are resolved at import time so other modules
can ``from config import …`` without repeated lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.logger import CourierLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

# ── Logger (used for startup diagnostics at the bottom of this module) ───────
logger = CourierLogger.get_logger()


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_float(name: str) -> float | None:
    """Read a positive float from the environment; unset or invalid gives ``None``."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric setting", extra={"setting": name, "value": raw})
        return None
    return value if value > 0 else None


def _parse_int(name: str) -> int | None:
    """Read a non-negative int from the environment; unset or invalid gives ``None``."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer setting", extra={"setting": name, "value": raw})
        return None
    return value if value >= 0 else None


def _parse_bool(name: str, fallback: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return fallback
    return raw in ("1", "true", "yes", "on")


def _resolve_log_level() -> int:
    """Map ``LOG_LEVEL`` (``DEBUG``, ``INFO``, …) to a :mod:`logging` constant."""
    name = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
API_HOST: str = os.environ.get("API_HOST", "api.telegram.org")
HTTP_TIMEOUT: float | None = _parse_float("HTTP_TIMEOUT")
POLL_TIMEOUT: int | None = _parse_int("POLL_TIMEOUT")
RUN_COMMANDS: bool = _parse_bool("RUN_COMMANDS", True)
LOG_LEVEL: int = _resolve_log_level()

CourierLogger.set_level(LOG_LEVEL)


# ── Startup diagnostics ─────────────────────────────────────────────────────

if BOT_TOKEN:
    logger.info("Config loaded — BOT_TOKEN is set", extra={"api_host": API_HOST})
else:
    logger.warning("Config loaded — BOT_TOKEN is NOT set")

if POLL_TIMEOUT and HTTP_TIMEOUT is not None and HTTP_TIMEOUT <= POLL_TIMEOUT:
    logger.warning(
        "HTTP_TIMEOUT does not exceed POLL_TIMEOUT; long polls will time out",
        extra={"http_timeout": HTTP_TIMEOUT, "poll_timeout": POLL_TIMEOUT},
    )

logger.info(
    "Polling settings resolved",
    extra={"http_timeout": HTTP_TIMEOUT, "poll_timeout": POLL_TIMEOUT, "run_commands": RUN_COMMANDS},
)
