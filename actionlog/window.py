"""History window (Qt) — renders both stacks and the save status."""
import logging
from typing import Optional

from PyQt5.QtCore import QTimer, Qt
from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGroupBox,
    QLabel, QLineEdit, QListWidget, QListWidgetItem, QPushButton, QShortcut,
)

from actionlog.persistence import SaveStatus

logger = logging.getLogger(__name__)

# (background, foreground) per status badge
_BADGE_COLORS = {
    SaveStatus.IDLE: ("#0d6efd", "white"),
    SaveStatus.PENDING: ("#6c757d", "white"),
    SaveStatus.SAVING: ("#ffc107", "#212529"),
    SaveStatus.SAVED: ("#198754", "white"),
    SaveStatus.LOADED: ("#198754", "white"),
    SaveStatus.ERROR: ("#dc3545", "white"),
}


class QtTimerScheduler:
    """Single-slot scheduler on a QTimer; callbacks run on the GUI thread."""

    def __init__(self, parent=None):
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._callback = None

    def schedule(self, delay_s: float, callback):
        self._callback = callback
        self._timer.start(int(delay_s * 1000))  # restarts if active

    def cancel(self):
        self._timer.stop()
        self._callback = None

    @property
    def pending(self) -> bool:
        return self._timer.isActive()

    def join(self, timeout=None):
        pass  # callbacks run synchronously on the GUI thread

    def _fire(self):
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


# config spelling -> Qt portable key name
_KEY_NAMES = {
    "ctrl": "Ctrl", "control": "Ctrl", "shift": "Shift", "alt": "Alt", "meta": "Meta",
    "pgup": "PgUp", "pageup": "PgUp", "pgdown": "PgDown", "pgdn": "PgDown", "pagedown": "PgDown",
    "del": "Del", "delete": "Del", "ins": "Ins", "insert": "Ins",
    "esc": "Esc", "escape": "Esc", "backspace": "Backspace", "space": "Space",
    "enter": "Enter", "return": "Return", "tab": "Tab", "home": "Home", "end": "End",
    "up": "Up", "down": "Down", "left": "Left", "right": "Right",
}


def hotkey_to_sequence(hotkey: str) -> QKeySequence:
    """'ctrl+shift+z' -> QKeySequence('Ctrl+Shift+Z'), 'ctrl+pgup' -> 'Ctrl+PgUp'."""
    parts = [p.strip().lower() for p in hotkey.split("+") if p.strip()]
    names = []
    for p in parts:
        if p in _KEY_NAMES:
            names.append(_KEY_NAMES[p])
        elif len(p) == 1 or (p[0] == "f" and p[1:].isdigit()):
            names.append(p.upper())  # letters, symbols, F1..F35
        else:
            names.append(p.capitalize())
    return QKeySequence.fromString("+".join(names), QKeySequence.PortableText)


class HistoryWindow(QMainWindow):
    """Main window: action input, done/undone lists, undo/redo/clear."""

    def __init__(self, config, action_history, parent=None):
        super().__init__(parent)
        self.config = config
        self.actions = action_history

        self.setWindowTitle("ActionLog — Undo / Redo")
        self.setMinimumWidth(520)
        self.setMinimumHeight(420)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        # === Input ===
        input_row = QHBoxLayout()
        self._input = QLineEdit()
        self._input.setPlaceholderText("Describe an action...")
        self._input.returnPressed.connect(self._on_submit)
        input_row.addWidget(self._input)
        self._add_btn = QPushButton("Add")
        self._add_btn.clicked.connect(self._on_submit)
        input_row.addWidget(self._add_btn)
        layout.addLayout(input_row)

        # === Stacks ===
        lists_row = QHBoxLayout()
        done_group = QGroupBox("Actions")
        done_layout = QVBoxLayout(done_group)
        self._done_count = QLabel("0")
        done_layout.addWidget(self._done_count)
        self._done_list = QListWidget()
        done_layout.addWidget(self._done_list)
        lists_row.addWidget(done_group)

        undone_group = QGroupBox("Undone")
        undone_layout = QVBoxLayout(undone_group)
        self._undone_count = QLabel("0")
        undone_layout.addWidget(self._undone_count)
        self._undone_list = QListWidget()
        undone_layout.addWidget(self._undone_list)
        lists_row.addWidget(undone_group)
        layout.addLayout(lists_row)

        # === Buttons ===
        buttons = QHBoxLayout()
        self._undo_btn = QPushButton("Undo")
        self._undo_btn.clicked.connect(self.actions.undo)
        buttons.addWidget(self._undo_btn)
        self._redo_btn = QPushButton("Redo")
        self._redo_btn.clicked.connect(self.actions.redo)
        buttons.addWidget(self._redo_btn)
        self._clear_btn = QPushButton("Clear")
        self._clear_btn.clicked.connect(self.actions.clear)
        buttons.addWidget(self._clear_btn)
        buttons.addStretch()
        self._status_badge = QLabel()
        buttons.addWidget(self._status_badge)
        layout.addLayout(buttons)

        self._last_saved = QLabel("")
        layout.addWidget(self._last_saved)

        # Shortcuts work anywhere in the application
        self._undo_shortcut = QShortcut(hotkey_to_sequence(config.hotkey_undo), self)
        self._undo_shortcut.setContext(Qt.ApplicationShortcut)
        self._undo_shortcut.activated.connect(self.actions.undo)
        self._redo_shortcut = QShortcut(hotkey_to_sequence(config.hotkey_redo), self)
        self._redo_shortcut.setContext(Qt.ApplicationShortcut)
        self._redo_shortcut.activated.connect(self.actions.redo)

        self.actions.on_change(self.render_stacks)
        self.actions.subscribe(self._on_status)

        self._on_status(self.actions.status, self.actions.gateway.message)
        self._update_last_saved()
        self.render_stacks()

    def render_stacks(self):
        done, undone = self.actions.snapshot()
        self._render_list(self._done_list, done)
        self._render_list(self._undone_list, undone)
        self._undo_btn.setEnabled(bool(done))
        self._redo_btn.setEnabled(bool(undone))
        self._done_count.setText(str(len(done)))
        self._undone_count.setText(str(len(undone)))

    @staticmethod
    def _render_list(widget: QListWidget, items):
        widget.clear()
        if not items:
            placeholder = QListWidgetItem("Empty")
            placeholder.setFlags(Qt.NoItemFlags)
            widget.addItem(placeholder)
            return
        for item in reversed(items):  # most recent first
            widget.addItem(item)

    def _on_submit(self):
        if self.actions.submit(self._input.text()):
            self._input.clear()
        self._input.setFocus()

    def _on_status(self, status: SaveStatus, message: Optional[str]):
        self._set_status(status)
        if status in (SaveStatus.SAVED, SaveStatus.LOADED):
            self._update_last_saved()
        if message:
            self.statusBar().showMessage(message, 4000)

    def _set_status(self, status: SaveStatus):
        bg, fg = _BADGE_COLORS[status]
        self._status_badge.setText(status.value)
        self._status_badge.setStyleSheet(
            f"background-color: {bg}; color: {fg}; border-radius: 4px; padding: 2px 6px;"
        )

    def _update_last_saved(self):
        saved_at = self.actions.gateway.last_saved_at
        if saved_at is not None:
            local = saved_at.astimezone().strftime("%H:%M:%S")
            self._last_saved.setText(f"Last saved: {local}")

    def closeEvent(self, event):
        if not self.actions.flush():
            logger.warning("Pending save failed on close")
        super().closeEvent(event)
