"""Prioritized back-button chain.

Independent scopes (shell, modals, context menus, detail sheets) register a
handler with a priority. A back event runs handlers from the highest priority
down; the first one returning True consumes it. A handler that is not
currently relevant returns False so lower priorities still get their turn.
"""
from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

BackHandler = Callable[[], bool]


@dataclass
class _Entry:
    handler_id: str
    priority: int
    handler: BackHandler
    sequence: int


class BackHandlerRegistration:
    """Handle tied to one mount scope; usable as a context manager."""

    def __init__(self, dispatcher: BackButtonDispatcher, entry: _Entry) -> None:
        self._dispatcher = dispatcher
        self._entry = entry
        self.handler_id = entry.handler_id

    @property
    def active(self) -> bool:
        return self._dispatcher._still_registered(self._entry)

    def unregister(self) -> None:
        """Remove this registration; a later one reusing the id is left alone."""
        self._dispatcher._remove_entry(self._entry)

    def __enter__(self) -> BackHandlerRegistration:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unregister()


class BackButtonDispatcher:

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}
        self._sequence = itertools.count()
        self._lock = threading.RLock()
        self._dispatching = False

    def register(self, handler_id: str, priority: int, handler: BackHandler) -> BackHandlerRegistration:
        """Register (or replace) the handler for ``handler_id``.

        Replacing keeps the original registration order, so re-registering on
        every update of a scope never reshuffles equal-priority handlers.
        """
        with self._lock:
            existing = self._entries.get(handler_id)
            sequence = existing.sequence if existing else next(self._sequence)
            entry = _Entry(handler_id, priority, handler, sequence)
            self._entries[handler_id] = entry
        return BackHandlerRegistration(self, entry)

    def unregister(self, handler_id: str) -> bool:
        with self._lock:
            return self._entries.pop(handler_id, None) is not None

    def _remove_entry(self, entry: _Entry) -> bool:
        with self._lock:
            if self._entries.get(entry.handler_id) is not entry:
                return False
            del self._entries[entry.handler_id]
            return True

    def is_registered(self, handler_id: str) -> bool:
        with self._lock:
            return handler_id in self._entries

    def handler_ids(self) -> List[str]:
        """Registered ids in dispatch order."""
        return [entry.handler_id for entry in self._ordered()]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def dispatch(self) -> bool:
        """Deliver one back event. Returns True if a handler consumed it."""
        with self._lock:
            if self._dispatching:
                logger.warning("Ignoring re-entrant back event")
                return False
            self._dispatching = True
            snapshot = self._ordered()
        try:
            for entry in snapshot:
                if not self._still_registered(entry):
                    continue
                if entry.handler():
                    logger.debug(f"Back event consumed by {entry.handler_id}")
                    return True
            return False
        finally:
            with self._lock:
                self._dispatching = False

    def _still_registered(self, entry: _Entry) -> bool:
        with self._lock:
            return self._entries.get(entry.handler_id) is entry

    def _ordered(self) -> List[_Entry]:
        with self._lock:
            return sorted(self._entries.values(), key=lambda e: (-e.priority, e.sequence))

