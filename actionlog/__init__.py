"""ActionLog — undo/redo action history with debounced local persistence."""

__version__ = "0.1.0"
