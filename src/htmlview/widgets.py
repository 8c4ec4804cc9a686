# -*- coding: utf-8 -*-
"""
Виджеты Qt: HTML-вид, прокручиваемый блок кода, метка со ссылками.
"""

import sys
import logging
import traceback
from typing import Dict, List, Optional

from PyQt6.QtWidgets import (
    QFrame, QVBoxLayout, QWidget, QLabel, QScrollArea, QSizePolicy
)
from PyQt6.QtCore import Qt, QThread, pyqtSignal
from PyQt6.QtGui import QGuiApplication

from htmlview.compiler import TreeCompiler
from htmlview.config import get_config_manager
from htmlview.models import CompilationTicket, ContainerKind, DisplayNode, InteractionHandlers
from htmlview.pipeline import CompilationTracker, get_default_compiler, process_html
from htmlview.qt_markup import split_at_scroll, to_rich_text
from htmlview.styles import STYLE_TABLE, style_for

logger = logging.getLogger(__name__)


def install_exception_hook():
    """Установить глобальный хук для необработанных исключений в цикле событий Qt."""
    def _exception_hook(exc_type, exc_value, exc_tb):
        lines = traceback.format_exception(exc_type, exc_value, exc_tb)
        msg = "".join(lines)
        logger.critical(f"Unhandled exception:\n{msg}")
        # Дальше Python завершается как обычно
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _exception_hook


class CompileWorker(QThread):
    """Воркер, компилирующий один HTML-ввод вне GUI-потока."""

    compiled = pyqtSignal(object, object)  # CompilationTicket, Optional[List[DisplayNode]]

    def __init__(self, ticket: CompilationTicket, compiler: TreeCompiler, parent=None):
        super().__init__(parent)
        self.ticket = ticket
        self.compiler = compiler

    def run(self):
        try:
            nodes = process_html(self.ticket.html, self.ticket.linkify, self.compiler)
        except Exception as e:
            logger.error(f"Compilation #{self.ticket.serial} failed: {e}")
            nodes = None
        self.compiled.emit(self.ticket, nodes)


class NodeLabel(QLabel):
    """Rich-text метка для одного узла; передаёт жесты по ссылкам обработчикам."""

    def __init__(self, node: DisplayNode, dark: bool = False, parent=None):
        super().__init__(parent)
        self._links: Dict[str, InteractionHandlers] = {}
        self._hovered: Optional[str] = None

        self.setTextFormat(Qt.TextFormat.RichText)
        self.setWordWrap(True)
        self.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
            | Qt.TextInteractionFlag.LinksAccessibleByMouse
        )
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.DefaultContextMenu)
        self.setText(to_rich_text(node, STYLE_TABLE, dark, self._links))

        self.linkActivated.connect(self._on_link_activated)
        self.linkHovered.connect(self._on_link_hovered)

    def _on_link_activated(self, key: str):
        handlers = self._links.get(key)
        if handlers is not None:
            handlers.on_activate()

    def _on_link_hovered(self, key: str):
        self._hovered = key or None

    def contextMenuEvent(self, event):
        """Правый клик по ссылке - аналог долгого нажатия на десктопе."""
        handlers = self._links.get(self._hovered) if self._hovered else None
        if handlers is not None:
            handlers.on_long_activate()
            event.accept()
            return
        super().contextMenuEvent(event)

    @property
    def links(self) -> Dict[str, InteractionHandlers]:
        return dict(self._links)


class PreView(QScrollArea):
    """Прокручиваемый блок для preformatted-текста с ограничением высоты."""

    def __init__(self, node: DisplayNode, dark: bool = False, max_height_ratio: float = 0.5, parent=None):
        super().__init__(parent)
        style = style_for(node.style_key)
        background = style.background.resolve(dark) if style.background else "transparent"

        self.setWidgetResizable(True)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.setStyleSheet(f"""
            QScrollArea {{
                background: {background};
                border-radius: {style.border_radius or 0}px;
                margin-bottom: {style.margin_bottom or 0}px;
            }}
        """)

        label = NodeLabel(node, dark)
        label.setWordWrap(False)
        label.setContentsMargins(style.padding or 0, style.padding or 0, style.padding or 0, style.padding or 0)
        self.setWidget(label)
        self._label = label

        screen = QGuiApplication.primaryScreen()
        if screen is not None:
            self.setMaximumHeight(int(screen.availableGeometry().height() * max_height_ratio))

    @property
    def label(self) -> NodeLabel:
        return self._label


class HtmlView(QWidget):
    """Рисует HTML-строку нативными виджетами; перекомпилирует на каждый ввод."""

    rendered = pyqtSignal(int)  # число узлов верхнего уровня

    def __init__(self, compiler: Optional[TreeCompiler] = None, parent=None):
        super().__init__(parent)
        self._compiler = compiler or get_default_compiler()
        self._tracker = CompilationTracker()
        self._workers: List[CompileWorker] = []
        self._nodes: Optional[List[DisplayNode]] = None

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)
        self._layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Minimum)

    def set_html(self, html: str, linkify: Optional[bool] = None) -> None:
        """Скомпилировать и показать `html`; linkify=None берёт значение из конфига."""
        if linkify is None:
            linkify = get_config_manager().get_config().linkify

        ticket = self._tracker.begin(html, linkify)
        worker = CompileWorker(ticket, self._compiler, self)
        worker.compiled.connect(self._on_compiled)
        worker.finished.connect(lambda w=worker: self._forget_worker(w))
        self._workers.append(worker)
        worker.start()

    def _forget_worker(self, worker: CompileWorker):
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()

    def _on_compiled(self, ticket: CompilationTicket, nodes: Optional[List[DisplayNode]]):
        if not self._tracker.is_current(ticket):
            logger.debug(f"Dropping stale compilation #{ticket.serial}")
            return
        self._nodes = nodes
        self._render(nodes or [])

    def _clear(self):
        while self._layout.count():
            item = self._layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

    def _render(self, nodes: List[DisplayNode]):
        self._clear()
        config = get_config_manager().get_config()
        for node in nodes:
            # Вложенные pre тоже получают собственную прокрутку
            for piece in split_at_scroll(node):
                if piece.container == ContainerKind.SCROLL:
                    widget = PreView(piece, config.dark_mode, config.pre_max_height_ratio)
                else:
                    widget = NodeLabel(piece, config.dark_mode)
                self._layout.addWidget(widget)
        self.rendered.emit(len(nodes))

    def shutdown(self) -> None:
        """Дождаться фоновых компиляций, результаты которых уже не нужны."""
        for worker in list(self._workers):
            worker.compiled.disconnect(self._on_compiled)
            worker.quit()
            worker.wait()
        self._workers.clear()

    def closeEvent(self, event):
        self.shutdown()
        super().closeEvent(event)

    @property
    def nodes(self) -> Optional[List[DisplayNode]]:
        """Показанное сейчас дерево узлов."""
        return self._nodes
