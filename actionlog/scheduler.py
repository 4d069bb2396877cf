"""Single-slot timers used to debounce saves."""
import threading
from typing import Callable, List, Optional


class TimerScheduler:
    """Runs at most one pending callback; scheduling again replaces it.

    Callbacks fire on a threading.Timer worker thread, one at a time.
    """

    def __init__(self):
        self._timer: Optional[threading.Timer] = None
        self._fired: List[threading.Timer] = []
        self._lock = threading.Lock()
        self._run_lock = threading.Lock()

    def schedule(self, delay_s: float, callback: Callable[[], None]):
        with self._lock:
            self._cancel_locked()
            timer = threading.Timer(delay_s, self._fire, args=(callback,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self):
        with self._lock:
            self._cancel_locked()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def join(self, timeout: Optional[float] = None):
        """Wait for callbacks that already fired to finish."""
        with self._lock:
            running = [t for t in self._fired if t.is_alive()]
            self._fired = running
        current = threading.current_thread()
        for timer in running:
            if timer is not current:
                timer.join(timeout)

    def _cancel_locked(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, callback):
        with self._lock:
            if self._timer is None or threading.current_thread() is not self._timer:
                return  # superseded
            self._timer = None
            self._fired.append(threading.current_thread())
        with self._run_lock:
            callback()
