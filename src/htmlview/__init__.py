"""
htmlview.

Компилирует rich-text HTML в дерево типизированных узлов отображения и
рисует его нативными виджетами Qt.
"""

from htmlview.compiler import TreeCompiler
from htmlview.linkify import linkify_html
from htmlview.models import (
    ParsedNode,
    DisplayNode,
    InteractionHandlers,
    NodeKind,
    StyleKey,
    ContainerKind,
    ViewerConfig,
)
from htmlview.parser import parse_markup
from htmlview.pipeline import CompilationTracker, process_html, prepare_markup
from htmlview.preprocess import normalize
from htmlview.styles import STYLE_TABLE
from htmlview.exceptions import (
    HtmlViewError,
    MarkupParseError,
    ConfigError,
)

__version__ = "1.0.0"

__all__ = [
    # Конвейер
    "process_html",
    "prepare_markup",
    "CompilationTracker",
    "normalize",
    "linkify_html",
    "parse_markup",
    "TreeCompiler",
    "STYLE_TABLE",
    # Модели
    "ParsedNode",
    "DisplayNode",
    "InteractionHandlers",
    "NodeKind",
    "StyleKey",
    "ContainerKind",
    "ViewerConfig",
    # Исключения
    "HtmlViewError",
    "MarkupParseError",
    "ConfigError",
]
