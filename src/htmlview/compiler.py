"""
Дерево ParsedNode -> дерево DisplayNode.

Свёртка снизу вверх: сначала компилируются дети, и тег, чьи дети ничего
не дали, отбрасывается, а не остаётся пустым контейнером.
"""

import itertools
import re
from functools import partial
from typing import Callable, Iterator, List, Mapping, Optional, Sequence

from htmlview.actions import open_browser, share_url
from htmlview.models import (
    ContainerKind,
    DisplayNode,
    InteractionHandlers,
    NodeKind,
    NodeStyle,
    ParsedNode,
    StyleKey,
)
from htmlview.styles import STYLE_TABLE


# ">> цитата" или "> цитата", весь текстовый узел
BLOCKQUOTE_PATTERN = re.compile(r'>{1,2}[^<>]+')

_WHITESPACE_RUN = re.compile(r'[\n\s\t]+')
_TRAILING_EOL = re.compile(r'\n\Z')
_INDENT = re.compile(r'^[ \t]*(?=\S)', re.MULTILINE)


def strip_indent(text: str) -> str:
    """Убрать отступ, общий для всех непустых строк."""
    indents = [len(m.group(0)) for m in _INDENT.finditer(text)]
    width = min(indents) if indents else 0
    if width == 0:
        return text
    return re.sub(r'^[ \t]{%d}' % width, '', text, flags=re.MULTILINE)


def normalize_text(data: str, enclosing: Optional[str]) -> str:
    """Обработка пробелов для текстового узла внутри `enclosing`."""
    if enclosing == "code":
        # Убрать перевод строки в конце, остальное как есть, но без общего отступа
        return strip_indent(_TRAILING_EOL.sub('', data, count=1))
    # Убрать ВСЕ переводы строк, это же HTML
    return _WHITESPACE_RUN.sub(' ', data)


def is_blockquote(paragraph: ParsedNode) -> bool:
    """
    Оформлен ли абзац как "> цитата".

    Смотрит на первого ребёнка, а если это тег (часто начальный <i>), то
    на его первого ребёнка. Пустой абзац цитатой не считается.
    """
    first = paragraph.children[0] if paragraph.children else None
    if first is not None and first.is_tag:
        first = first.children[0] if first.children else None
    text = first.data if first is not None and first.is_text else None
    if not text:
        return False
    return text == ">" or BLOCKQUOTE_PATTERN.fullmatch(text) is not None


class TreeCompiler:
    """Компилирует разобранную разметку в узлы отображения."""

    def __init__(
        self,
        styles: Mapping[StyleKey, NodeStyle] = STYLE_TABLE,
        on_open: Callable[[str], None] = open_browser,
        on_share: Callable[[str], None] = share_url,
    ):
        self.styles = styles
        self.on_open = on_open
        self.on_share = on_share

    def compile(
        self,
        nodes: Optional[Sequence[ParsedNode]],
        enclosing: Optional[str] = None
    ) -> Optional[List[DisplayNode]]:
        """
        Скомпилировать последовательность узлов.

        Возвращает None, если рисовать нечего. Ключи уникальны только в
        пределах этого вызова.
        """
        return self._compile_nodes(nodes, enclosing, itertools.count(1))

    def _style_key(self, name: Optional[str]) -> StyleKey:
        key = StyleKey.from_tag(name)
        return key if key in self.styles else StyleKey.DEFAULT

    def _compile_nodes(
        self,
        nodes: Optional[Sequence[ParsedNode]],
        enclosing: Optional[str],
        ids: Iterator[int]
    ) -> Optional[List[DisplayNode]]:
        if not nodes:
            return None
        compiled = []
        for node in nodes:
            element = self._compile_node(node, enclosing, ids)
            if element is not None:
                compiled.append(element)
        return compiled or None

    def _compile_node(
        self,
        node: ParsedNode,
        enclosing: Optional[str],
        ids: Iterator[int]
    ) -> Optional[DisplayNode]:
        if node.kind == NodeKind.TAG:
            return self._compile_tag(node, ids)
        if node.kind == NodeKind.TEXT:
            return DisplayNode(
                key=f"text-{next(ids)}",
                style_key=self._style_key(enclosing),
                content=normalize_text(node.data or "", enclosing),
            )
        return None

    def _compile_tag(self, node: ParsedNode, ids: Iterator[int]) -> Optional[DisplayNode]:
        name = node.name
        key = f"{name}-{next(ids)}"
        elements = self._compile_nodes(node.children, name, ids)
        if elements is None:
            return None

        if name == "pre":
            return DisplayNode(
                key=key,
                style_key=StyleKey.PRE,
                container=ContainerKind.SCROLL,
                content=elements,
            )

        if name == "a":
            return self._compile_anchor(node, key, elements)

        if name == "p" and is_blockquote(node):
            return DisplayNode(key=key, style_key=StyleKey.BLOCKQUOTE, content=elements)

        return DisplayNode(key=key, style_key=self._style_key(name), content=elements)

    def _compile_anchor(self, node: ParsedNode, key: str, elements: List[DisplayNode]) -> DisplayNode:
        # Ссылка обычно оборачивает простой текст; для вложенной разметки
        # берутся скомпилированные дети
        only = node.children[0] if len(node.children) == 1 else None
        label = only.data if only is not None and only.is_text else None

        href = node.attributes.get("href")
        handlers = None
        if href:
            handlers = InteractionHandlers(
                href=href,
                on_activate=partial(self.on_open, href),
                on_long_activate=partial(self.on_share, href),
            )
        return DisplayNode(
            key=key,
            style_key=self._style_key("a"),
            content=label or elements,
            handlers=handlers,
        )
