"""
Log Viewer Panel

Mirrors application log records into a read-only text view.
"""

import html
import logging
from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QPlainTextEdit, QHBoxLayout,
    QPushButton, QComboBox, QLabel
)
from PySide6.QtCore import Signal, Slot, QObject
from PySide6.QtGui import QFont


LEVEL_COLORS = {
    logging.ERROR: "#D32F2F",
    logging.WARNING: "#F57C00",
    logging.INFO: "#1976D2",
    logging.DEBUG: "#757575",
}


class LogEmitter(QObject):
    """Helper object to emit signals from the logging handler."""
    log_message = Signal(str, int)


class QLogHandler(logging.Handler):
    """
    Logging handler that re-emits each record as a Qt signal.

    Records may come from worker threads; the queued signal delivers them
    on the GUI thread.
    """

    def __init__(self, parent=None):
        super().__init__()
        self.emitter = LogEmitter(parent)

    def emit(self, record):
        msg = self.format(record)
        self.emitter.log_message.emit(msg, record.levelno)


class LogViewerPanel(QWidget):
    """Panel for viewing application logs."""

    def __init__(self, max_lines: int = 5000, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._max_lines = max_lines
        self._setup_ui()
        self._setup_logging()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(4, 4, 4, 0)
        toolbar.addWidget(QLabel("Level:"))

        self._level_combo = QComboBox()
        self._level_combo.addItems(["DEBUG", "INFO", "WARNING", "ERROR"])
        self._level_combo.setCurrentText("INFO")
        self._level_combo.currentTextChanged.connect(self._on_level_changed)
        toolbar.addWidget(self._level_combo)
        toolbar.addStretch()

        clear_btn = QPushButton("Clear")
        clear_btn.setFixedWidth(60)
        clear_btn.clicked.connect(self.clear_logs)
        toolbar.addWidget(clear_btn)

        layout.addLayout(toolbar)

        self._text_edit = QPlainTextEdit()
        self._text_edit.setReadOnly(True)
        self._text_edit.setLineWrapMode(QPlainTextEdit.NoWrap)
        self._text_edit.setMaximumBlockCount(self._max_lines)

        font = QFont("Consolas", 9)
        if not font.exactMatch():
            font = QFont("Monospace", 9)
        self._text_edit.setFont(font)

        layout.addWidget(self._text_edit)

    def _setup_logging(self) -> None:
        self._handler = QLogHandler(self)
        self._handler.setLevel(logging.INFO)
        self._handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        self._handler.emitter.log_message.connect(self._append_log)
        handler = self._handler
        logging.getLogger().addHandler(handler)
        self.destroyed.connect(lambda: logging.getLogger().removeHandler(handler))

    @property
    def handler(self) -> QLogHandler:
        return self._handler

    def _on_level_changed(self, text: str) -> None:
        """Only records at or above the selected level are shown."""
        self._handler.setLevel(getattr(logging, text))

    @Slot(str, int)
    def _append_log(self, msg: str, levelno: int) -> None:
        color = "#000000"
        for level in sorted(LEVEL_COLORS, reverse=True):
            if levelno >= level:
                color = LEVEL_COLORS[level]
                break
        self._text_edit.appendHtml(f'<span style="color:{color};">{html.escape(msg)}</span>')

    def text(self) -> str:
        return self._text_edit.toPlainText()

    def clear_logs(self) -> None:
        """Clear the log display."""
        self._text_edit.clear()
