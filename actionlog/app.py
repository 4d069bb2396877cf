"""ActionHistory — wires the history store to debounced persistence."""
import enum
import logging
import threading
from typing import Callable, List, Optional

from actionlog.config import Config
from actionlog.errors import CorruptDataError, StorageError
from actionlog.history import HistoryStore
from actionlog.persistence import PersistenceGateway, SaveStatus, StatusListener
from actionlog.storage import FileKeyValueStore

logger = logging.getLogger(__name__)


class LoadOutcome(enum.Enum):
    ABSENT = "absent"
    LOADED = "loaded"
    CORRUPT = "corrupt"


class ActionHistory:
    """Owns one HistoryStore and its PersistenceGateway.

    All mutations and the gateway's snapshot read go through ``_lock``,
    since the default scheduler fires saves on a timer thread.
    """

    def __init__(self, config: Config, store=None, scheduler=None, clock=None):
        self.config = config
        self._lock = threading.Lock()
        self._change_listeners: List[Callable[[], None]] = []
        kv_store = store if store is not None else FileKeyValueStore(config.storage_dir)
        self.gateway = PersistenceGateway(
            kv_store,
            key=config.storage_key,
            scheduler=scheduler,
            debounce_ms=config.debounce_ms,
            source=self.snapshot,
            clock=clock,
        )
        self._dirty = False
        self.history = HistoryStore(on_change=self._mark_dirty)

    # -- subscriptions -------------------------------------------------

    def subscribe(self, listener: StatusListener):
        """Receive ``(SaveStatus, message)`` on every status change."""
        self.gateway.subscribe(listener)

    def on_change(self, listener: Callable[[], None]):
        """Receive a call after every stack mutation."""
        self._change_listeners.append(listener)

    @property
    def status(self) -> SaveStatus:
        return self.gateway.status

    # -- lifecycle -----------------------------------------------------

    def hydrate(self) -> LoadOutcome:
        """Load the persisted snapshot once at startup.

        Corrupt or unreadable data leaves both stacks empty and reports a
        warning instead of failing.
        """
        try:
            snapshot = self.gateway.load()
        except (CorruptDataError, StorageError) as e:
            logger.warning("Failed to load saved state: %s", e)
            self.gateway.report(SaveStatus.IDLE,
                                "Saved history could not be read and was ignored.")
            return LoadOutcome.CORRUPT

        if snapshot is None:
            logger.info("No saved history under %r", self.gateway.key)
            return LoadOutcome.ABSENT

        with self._lock:
            self.history.restore(snapshot.done, snapshot.undone)
        logger.info("Loaded %d done / %d undone actions",
                    len(snapshot.done), len(snapshot.undone))
        if snapshot.saved_at is not None:
            self.gateway.report(SaveStatus.LOADED)
        self._notify_change()
        return LoadOutcome.LOADED

    def flush(self) -> bool:
        return self.gateway.flush()

    # -- operations ----------------------------------------------------

    def submit(self, text: str) -> bool:
        """Record trimmed ``text``; blank input is rejected."""
        entry = (text or "").strip()
        if not entry:
            return False
        self.record(entry)
        return True

    def record(self, entry: str):
        with self._lock:
            self.history.record(entry)
        self._after_mutation()

    def undo(self) -> Optional[str]:
        with self._lock:
            entry = self.history.undo()
        self._after_mutation()
        return entry

    def redo(self) -> Optional[str]:
        with self._lock:
            entry = self.history.redo()
        self._after_mutation()
        return entry

    def clear(self):
        with self._lock:
            self.history.clear()
        self._after_mutation()

    def snapshot(self):
        with self._lock:
            return self.history.snapshot()

    def _mark_dirty(self):
        self._dirty = True

    def _after_mutation(self):
        # Listeners may read snapshot(), so they run outside _lock.
        with self._lock:
            dirty, self._dirty = self._dirty, False
        if not dirty:
            return
        self.gateway.request_save()
        self._notify_change()

    def _notify_change(self):
        for listener in list(self._change_listeners):
            listener()
