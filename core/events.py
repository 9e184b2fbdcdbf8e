"""Observer registry for lifecycle signals.

Signals are informational: observers are called synchronously in
subscription order, and an observer that raises is logged and skipped so it
can never interfere with dispatch.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from core.logger import SwitchyardLogger

logger = SwitchyardLogger.get_logger()

Observer = Callable[..., Any]

SYNC = "sync"
ERROR = "error"
UPDATE_ERROR = "update_error"

SIGNALS: frozenset[str] = frozenset({SYNC, ERROR, UPDATE_ERROR})


class EventHub:
    """Per-dispatcher subscribe/unsubscribe/emit for the known signals."""

    def __init__(self) -> None:
        self._observers: Dict[str, List[Observer]] = {name: [] for name in SIGNALS}

    def subscribe(self, signal: str, observer: Observer) -> None:
        """Call *observer* every time *signal* is emitted.

        Raises:
            ValueError: For an unknown signal name.
            TypeError: If *observer* is not callable.
        """
        if signal not in self._observers:
            raise ValueError(f"Unknown signal {signal!r}; expected one of {sorted(SIGNALS)}")
        if not callable(observer):
            raise TypeError("Observer must be callable")
        self._observers[signal].append(observer)

    def unsubscribe(self, signal: str, observer: Observer) -> bool:
        """Remove one subscription of *observer*; returns whether it was found."""
        observers = self._observers.get(signal, [])
        try:
            observers.remove(observer)
        except ValueError:
            return False
        return True

    def observers(self, signal: str) -> List[Observer]:
        return list(self._observers.get(signal, []))

    def emit(self, signal: str, *args: Any) -> int:
        """Notify observers of *signal*; returns how many ran without error."""
        delivered = 0
        for observer in self.observers(signal):
            try:
                observer(*args)
            except Exception:
                logger.exception("Observer failed", extra={"signal": signal})
                continue
            delivered += 1
        return delivered
