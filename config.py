"""Application configuration — environment variables and derived constants.

Loads the bot token and update-loop settings from the environment via
``python-dotenv``.  All values are resolved at import time so other modules
can ``from config import …`` without repeated lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── core ─────────────────────────────────────────────────────────────────────
from core.logger import SwitchyardLogger

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

logger = SwitchyardLogger.get_logger()


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_number(name: str, default, cast=int):
    """Read *name* from the environment as a number, falling back to *default*."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning("Invalid numeric setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default
    if value < 0:
        logger.warning("Negative numeric setting, using default", extra={"setting": name, "value": raw, "default": default})
        return default
    return value


def _parse_list(raw: str | None) -> list[str]:
    """Split a comma-separated setting, dropping empty tokens."""
    if not raw:
        return []
    return [token.strip() for token in raw.split(",") if token.strip()]


# ── Public constants ─────────────────────────────────────────────────────────

BOT_TOKEN: str | None = os.environ.get("BOT_TOKEN")
API_URL: str = os.environ.get("API_URL", "https://api.telegram.org").rstrip("/")

POLL_TIMEOUT: int = _parse_number("POLL_TIMEOUT", 30)
POLL_LIMIT: int = _parse_number("POLL_LIMIT", 100)
RETRY_DELAY: float = _parse_number("RETRY_DELAY", 5.0, cast=float)
ALLOWED_UPDATES: list[str] = _parse_list(os.environ.get("ALLOWED_UPDATES"))
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()


# ── Startup diagnostics ─────────────────────────────────────────────────────

if BOT_TOKEN:
    logger.info("Config loaded — BOT_TOKEN is set", extra={"api_url": API_URL})
else:
    logger.warning("Config loaded — BOT_TOKEN is NOT set")

logger.debug(
    "Update loop settings",
    extra={
        "poll_timeout": POLL_TIMEOUT,
        "poll_limit": POLL_LIMIT,
        "retry_delay": RETRY_DELAY,
        "allowed_updates": ALLOWED_UPDATES,
    },
)
