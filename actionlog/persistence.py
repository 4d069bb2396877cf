"""Persistence gateway — debounced snapshot writes to a key-value store.

Persisted layout (one key, JSON):

    {"actions": [...], "redo": [...], "savedAt": "2024-05-01T12:00:00.000Z"}

Missing ``actions``/``redo`` read as empty lists; ``savedAt`` is optional.
"""
import enum
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from actionlog.errors import CorruptDataError, StorageError
from actionlog.scheduler import TimerScheduler

logger = logging.getLogger(__name__)

DEFAULT_KEY = "undoRedoState"
DEFAULT_DEBOUNCE_MS = 350


class SaveStatus(enum.Enum):
    IDLE = "Idle"
    PENDING = "Pending save"
    SAVING = "Saving..."
    SAVED = "Saved locally"
    ERROR = "Error"
    LOADED = "Loaded"


@dataclass(frozen=True)
class PersistedSnapshot:
    done: Tuple[str, ...] = ()
    undone: Tuple[str, ...] = ()
    saved_at: Optional[datetime] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def encode_snapshot(snapshot: PersistedSnapshot) -> str:
    payload = {
        "actions": list(snapshot.done),
        "redo": list(snapshot.undone),
    }
    if snapshot.saved_at is not None:
        payload["savedAt"] = format_timestamp(snapshot.saved_at)
    return json.dumps(payload, ensure_ascii=False)


def _string_list(data: dict, field: str) -> Tuple[str, ...]:
    value = data.get(field)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise CorruptDataError(f"'{field}' must be a list of strings")
    return tuple(value)


def decode_snapshot(raw: str) -> PersistedSnapshot:
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise CorruptDataError(f"Stored value is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise CorruptDataError("Stored value is not a JSON object")

    saved_at = None
    raw_saved = data.get("savedAt")
    if raw_saved is not None:
        if not isinstance(raw_saved, str):
            raise CorruptDataError("'savedAt' must be a string")
        try:
            saved_at = parse_timestamp(raw_saved)
        except ValueError as e:
            raise CorruptDataError(f"Bad 'savedAt' timestamp: {raw_saved!r}") from e

    return PersistedSnapshot(
        done=_string_list(data, "actions"),
        undone=_string_list(data, "redo"),
        saved_at=saved_at,
    )


StatusListener = Callable[[SaveStatus, Optional[str]], None]


class PersistenceGateway:
    """Saves and restores history snapshots without blocking every mutation.

    ``request_save`` is a trailing-edge debounce: each call restarts the
    delay, and when it elapses the current state is pulled from ``source``
    and written once. Status changes are pushed to subscribed listeners.
    """

    def __init__(self, store, key: str = DEFAULT_KEY, scheduler=None,
                 debounce_ms: int = DEFAULT_DEBOUNCE_MS,
                 clock: Optional[Callable[[], datetime]] = None,
                 source: Optional[Callable[[], Tuple[Tuple[str, ...], Tuple[str, ...]]]] = None):
        self._store = store
        self._key = key
        self._scheduler = scheduler if scheduler is not None else TimerScheduler()
        self._delay_s = debounce_ms / 1000.0
        self._clock = clock or _utcnow
        self._source = source
        self._listeners: List[StatusListener] = []
        self._status = SaveStatus.IDLE
        self._last_saved_at: Optional[datetime] = None
        self._last_save_ok = True
        self._message: Optional[str] = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def message(self) -> Optional[str]:
        """Message attached to the most recent status report, if any."""
        return self._message

    @property
    def last_saved_at(self) -> Optional[datetime]:
        return self._last_saved_at

    def bind(self, source):
        """Set the callable returning ``(done, undone)`` at save time."""
        self._source = source

    def subscribe(self, listener: StatusListener):
        self._listeners.append(listener)

    def report(self, status: SaveStatus, message: Optional[str] = None):
        self._status = status
        self._message = message
        for listener in list(self._listeners):
            listener(status, message)

    def request_save(self):
        self.report(SaveStatus.PENDING)
        self._scheduler.schedule(self._delay_s, self._run_scheduled_save)
        logger.debug("Save scheduled in %.0f ms", self._delay_s * 1000)

    def save_now(self, snapshot: PersistedSnapshot) -> PersistedSnapshot:
        """Write ``snapshot`` stamped with the current time. Raises StorageError."""
        stamped = PersistedSnapshot(
            done=tuple(snapshot.done),
            undone=tuple(snapshot.undone),
            saved_at=self._clock(),
        )
        self._store.set_item(self._key, encode_snapshot(stamped))
        self._last_saved_at = stamped.saved_at
        logger.info("Saved %d done / %d undone under %r",
                    len(stamped.done), len(stamped.undone), self._key)
        return stamped

    def load(self) -> Optional[PersistedSnapshot]:
        """Return the stored snapshot, None if absent. Raises CorruptDataError."""
        raw = self._store.get_item(self._key)
        if raw is None or raw == "":
            return None
        snapshot = decode_snapshot(raw)
        if snapshot.saved_at is not None:
            self._last_saved_at = snapshot.saved_at
        return snapshot

    def flush(self) -> bool:
        """Run a pending save immediately, or wait for one already running.

        Returns False if that save failed.
        """
        if not self._scheduler.pending:
            self._scheduler.join()
            return self._last_save_ok
        self._scheduler.cancel()
        return self._run_scheduled_save()

    def _run_scheduled_save(self) -> bool:
        if self._source is None:
            raise RuntimeError("PersistenceGateway has no bound source")
        self.report(SaveStatus.SAVING)
        done, undone = self._source()
        try:
            self.save_now(PersistedSnapshot(done=done, undone=undone))
        except StorageError as e:
            logger.error("Failed to save history: %s", e)
            self._last_save_ok = False
            self.report(SaveStatus.ERROR,
                        "Failed to save locally. Check storage availability.")
            return False
        self._last_save_ok = True
        if not self._scheduler.pending:  # a newer mutation is still waiting
            self.report(SaveStatus.SAVED)
        return True
