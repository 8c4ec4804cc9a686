# -*- coding: utf-8 -*-
"""
Окно живого предпросмотра (PyQt6).
"""

import sys
import logging
from typing import Optional

from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPlainTextEdit, QCheckBox, QSplitter, QScrollArea, QLabel
)
from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont

from htmlview.config import get_config_manager
from htmlview.widgets import HtmlView, install_exception_hook

logger = logging.getLogger(__name__)


class PreviewWindow(QMainWindow):
    """Слева редактор исходника, справа отрисованный вид."""

    def __init__(self, html: str = "", linkify: Optional[bool] = None):
        super().__init__()
        self.setWindowTitle("htmlview preview")
        self.resize(1100, 700)

        if linkify is None:
            linkify = get_config_manager().get_config().linkify

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # Исходник
        source_panel = QWidget()
        source_layout = QVBoxLayout(source_panel)
        source_layout.setContentsMargins(6, 6, 6, 6)

        options = QHBoxLayout()
        self.linkify_box = QCheckBox("Linkify")
        self.linkify_box.setChecked(linkify)
        self.linkify_box.toggled.connect(self._schedule_render)
        options.addWidget(self.linkify_box)
        options.addStretch(1)
        self.status_label = QLabel()
        self.status_label.setStyleSheet("color: #6c757d; font-size: 10px;")
        options.addWidget(self.status_label)
        source_layout.addLayout(options)

        self.editor = QPlainTextEdit()
        self.editor.setFont(QFont("Menlo", 11))
        self.editor.setPlainText(html)
        self.editor.textChanged.connect(self._schedule_render)
        source_layout.addWidget(self.editor)
        splitter.addWidget(source_panel)

        # Отрисовка
        self.view = HtmlView()
        self.view.rendered.connect(self._on_rendered)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.view)
        splitter.addWidget(scroll)
        splitter.setSizes([500, 600])

        self.setCentralWidget(splitter)

        # Не перерисовывать на каждое нажатие клавиши
        self._render_timer = QTimer(self)
        self._render_timer.setSingleShot(True)
        self._render_timer.setInterval(200)
        self._render_timer.timeout.connect(self._render)

        self._render()

    def _schedule_render(self, *args):
        self._render_timer.start()

    def _render(self):
        self.view.set_html(self.editor.toPlainText(), self.linkify_box.isChecked())

    def _on_rendered(self, count: int):
        self.status_label.setText(f"Блоков: {count}")

    def closeEvent(self, event):
        self._render_timer.stop()
        self.view.shutdown()
        super().closeEvent(event)


def run_gui(html: str = "", linkify: Optional[bool] = None):
    """Запустить приложение предпросмотра."""
    install_exception_hook()

    app = QApplication(sys.argv)
    app.setApplicationName("htmlview")
    app.setStyle("Fusion")

    window = PreviewWindow(html, linkify)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run_gui()
