"""
HTML-строка -> дерево отображения, от начала до конца.
"""

import itertools
import logging
import threading
from typing import List, Optional

from htmlview.compiler import TreeCompiler
from htmlview.exceptions import MarkupParseError
from htmlview.linkify import linkify_html
from htmlview.models import CompilationTicket, DisplayNode
from htmlview.parser import parse_markup
from htmlview.preprocess import normalize

logger = logging.getLogger(__name__)

_default_compiler: Optional[TreeCompiler] = None


def get_default_compiler() -> TreeCompiler:
    """Общий компилятор с десктопными действиями для ссылок."""
    global _default_compiler

    if _default_compiler is None:
        _default_compiler = TreeCompiler()

    return _default_compiler


def prepare_markup(html: str, linkify: bool = False) -> str:
    """Разметка ровно в том виде, в каком она уходит парсеру."""
    if linkify:
        html = linkify_html(html)
    return normalize(html)


def process_html(
    html: str,
    linkify: bool = False,
    compiler: Optional[TreeCompiler] = None
) -> Optional[List[DisplayNode]]:
    """
    Скомпилировать HTML-строку в узлы отображения.

    На плохой разметке не падает: ошибка парсера логируется, и результат
    None, как и для пустого ввода.
    """
    if not html or not html.strip():
        return None

    markup = prepare_markup(html, linkify)
    try:
        dom = parse_markup(markup)
    except MarkupParseError as e:
        logger.error(f"{e.message} (details: {e.details})")
        return None

    return (compiler or get_default_compiler()).compile(dom)


class CompilationTracker:
    """
    Учёт асинхронных компиляций по правилу "побеждает последний".

    Каждый запрос получает билет; актуален только билет последнего запроса,
    поэтому результаты, пришедшие не по порядку, отбрасываются.
    """

    def __init__(self):
        self._serial = itertools.count(1)
        self._latest: Optional[CompilationTicket] = None
        self._lock = threading.Lock()

    def begin(self, html: str, linkify: bool) -> CompilationTicket:
        with self._lock:
            ticket = CompilationTicket(serial=next(self._serial), html=html, linkify=linkify)
            self._latest = ticket
            return ticket

    def is_current(self, ticket: CompilationTicket) -> bool:
        with self._lock:
            return self._latest is not None and ticket == self._latest

    @property
    def latest(self) -> Optional[CompilationTicket]:
        return self._latest
