"""History store — the done/undone stack pair behind undo and redo."""
import logging
from typing import Callable, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class HistoryStore:
    """Two-stack undo/redo log of action labels.

    The done stack holds applied actions, the undone stack holds actions
    removed by undo; both keep the most recent entry at the tail. Every
    mutation calls ``on_change`` so the owner can schedule a save.
    """

    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        self._done: List[str] = []
        self._undone: List[str] = []
        self._on_change = on_change

    def record(self, entry: str):
        self._done.append(entry)
        self._undone.clear()
        logger.debug("Recorded %r (done=%d)", entry, len(self._done))
        self._changed()

    def undo(self) -> Optional[str]:
        if not self._done:
            return None
        entry = self._done.pop()
        self._undone.append(entry)
        logger.debug("Undo %r", entry)
        self._changed()
        return entry

    def redo(self) -> Optional[str]:
        if not self._undone:
            return None
        entry = self._undone.pop()
        self._done.append(entry)
        logger.debug("Redo %r", entry)
        self._changed()
        return entry

    def clear(self):
        self._done.clear()
        self._undone.clear()
        logger.debug("History cleared")
        self._changed()

    def snapshot(self) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        return tuple(self._done), tuple(self._undone)

    def restore(self, done: Iterable[str], undone: Iterable[str]):
        """Replace both stacks (hydration). Does not notify."""
        self._done = list(done)
        self._undone = list(undone)

    @property
    def can_undo(self) -> bool:
        return bool(self._done)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone)

    @property
    def done_count(self) -> int:
        return len(self._done)

    @property
    def undone_count(self) -> int:
        return len(self._undone)

    def _changed(self):
        if self._on_change is not None:
            self._on_change()
