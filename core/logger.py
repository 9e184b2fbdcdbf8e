"""SwitchyardLogger — JSON logging for dispatch, polling and API calls.

Every module logs through the one ``switchyard`` logger.  Records carry the
dispatch context as ``extra`` fields (``update_id``, ``kind``,
``handler_index``, ``offset``, ``api_endpoint``) and are written as one JSON
object per line to stdout and to ``logs/switchyard.log``.  ``LOG_LEVEL``
(a level name or number) overrides the level passed on first use.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: the fixed fields, any traceback, then extras.

    ``logger.debug("Dispatching update", extra={"update_id": 7, "kind": "message"})``
    yields ``{"timestamp": ..., "level": "DEBUG", ..., "update_id": 7, "kind": "message"}``.
    """

    # Attributes every LogRecord has; anything else came in via ``extra``.
    _BUILTIN_ATTRS: frozenset[str] = frozenset(vars(logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None,
    )))

    def format(self, record: logging.LogRecord) -> str:
        """Serialize *record* to a JSON string, including any traceback."""
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func_name": record.funcName,
        }
        if record.exc_info:
            log_entry["exc_info"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in self._BUILTIN_ATTRS and key not in log_entry:
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _level_from_env(default: int) -> int:
    """Resolve ``LOG_LEVEL`` (name or number) to a logging level."""
    raw = os.environ.get("LOG_LEVEL")
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


class SwitchyardLogger:
    """Process-wide owner of the ``switchyard`` logger.

    Modules fetch it once at import time::

        logger = SwitchyardLogger.get_logger()

    The first call decides the level and attaches the console and rotating
    file handlers; :meth:`cleanup` detaches them on shutdown.
    """

    _instance: Optional["SwitchyardLogger"] = None
    _logger: Optional[logging.Logger] = None

    _LOG_DIR: str = "logs"
    _LOG_FILE: str = "switchyard.log"
    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(cls, level: int = logging.INFO) -> "SwitchyardLogger":
        """Ensure only one instance is ever created (Singleton)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init_logger(_level_from_env(level))
        return cls._instance

    # ------------------------------------------------------------------
    # Initialisation helpers
    # ------------------------------------------------------------------

    def _init_logger(self, level: int) -> None:
        """Create the underlying :class:`logging.Logger` and attach handlers."""
        self._logger = logging.getLogger("switchyard")
        self._logger.setLevel(level)

        # Avoid duplicate handlers if the module is reloaded.
        if self._logger.handlers:
            return

        formatter = _JsonFormatter()

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)
        self._logger.addHandler(stream_handler)

        os.makedirs(self._LOG_DIR, exist_ok=True)
        log_path = os.path.join(self._LOG_DIR, self._LOG_FILE)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=self._MAX_BYTES,
            backupCount=self._BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        self._logger.addHandler(file_handler)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @staticmethod
    def get_logger(level: int = logging.INFO) -> logging.Logger:
        """Return the shared :class:`logging.Logger` instance.

        Creates the singleton on first call; subsequent calls return the
        same logger regardless of the *level* argument.
        """
        instance = SwitchyardLogger(level)
        assert instance._logger is not None  # guaranteed by __new__
        return instance._logger

    def cleanup(self) -> None:
        """Flush and close all handlers attached to the logger."""
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)
