"""
Снисходительный парсер разметки.

Строит дерево ParsedNode поверх html.parser.HTMLParser и прощает то же,
что прощают браузерные построители DOM: неявные закрытия, пустые
элементы, лишние закрывающие теги.
"""

from html.parser import HTMLParser
from typing import List, Optional, Tuple

from htmlview.exceptions import MarkupParseError
from htmlview.models import NodeKind, ParsedNode


VOID_ELEMENTS = frozenset({
    "area", "base", "basefont", "br", "col", "command", "embed", "frame",
    "hr", "img", "input", "isindex", "keygen", "link", "meta", "param",
    "source", "track", "wbr",
})

_P = frozenset({"p"})
_FORM_TAGS = frozenset({"input", "option", "optgroup", "select", "button", "datalist", "textarea"})
_DD_DT = frozenset({"dd", "dt"})
_RT_RP = frozenset({"rt", "rp"})
_TABLE_SECTIONS = frozenset({"thead", "tbody"})

# Открывающий тег -> ближайшие открытые элементы, которые он закрывает
IMPLIED_CLOSES = {
    "tr": frozenset({"tr", "th", "td"}),
    "th": frozenset({"th"}),
    "td": frozenset({"thead", "th", "td"}),
    "body": frozenset({"head", "link", "script"}),
    "li": frozenset({"li"}),
    "option": frozenset({"option"}),
    "optgroup": frozenset({"optgroup", "option"}),
    "dd": _DD_DT,
    "dt": _DD_DT,
    "rt": _RT_RP,
    "rp": _RT_RP,
    "tbody": _TABLE_SECTIONS,
    "tfoot": _TABLE_SECTIONS,
}
for _tag in ("select", "input", "output", "button", "datalist", "textarea"):
    IMPLIED_CLOSES[_tag] = _FORM_TAGS
for _tag in (
    "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "address", "article", "aside", "blockquote", "details", "div", "dl",
    "fieldset", "figcaption", "figure", "footer", "form", "header", "hr",
    "main", "nav", "ol", "pre", "section", "table", "ul",
):
    IMPLIED_CLOSES[_tag] = _P


class MarkupParser(HTMLParser):
    """Подкласс HTMLParser, собирающий дерево ParsedNode."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.roots: List[ParsedNode] = []
        self._stack: List[ParsedNode] = []

    def _append(self, node: ParsedNode) -> None:
        siblings = self._stack[-1].children if self._stack else self.roots
        siblings.append(node)

    def _open(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> ParsedNode:
        closes = IMPLIED_CLOSES.get(tag)
        if closes:
            while self._stack and self._stack[-1].name in closes:
                self._stack.pop()

        node = ParsedNode.tag(tag, {name: value or "" for name, value in attrs})
        self._append(node)
        if tag not in VOID_ELEMENTS:
            self._stack.append(node)
        return node

    def _close(self, tag: str) -> None:
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].name == tag:
                del self._stack[index:]
                return
        # Лишние закрывающие теги, как их понимают браузеры
        if tag == "p":
            self._open("p", [])
            self._close("p")
        elif tag == "br":
            self._open("br", [])

    def handle_starttag(self, tag, attrs):
        self._open(tag, attrs)

    def handle_startendtag(self, tag, attrs):
        node = self._open(tag, attrs)
        if self._stack and self._stack[-1] is node:
            self._stack.pop()

    def handle_endtag(self, tag):
        if tag in VOID_ELEMENTS and tag != "br":
            return
        self._close(tag)

    def handle_data(self, data):
        if not data:
            return
        siblings = self._stack[-1].children if self._stack else self.roots
        if siblings and siblings[-1].kind == NodeKind.TEXT:
            siblings[-1].data += data
        else:
            siblings.append(ParsedNode.text(data))

    def handle_comment(self, data):
        self._append(ParsedNode(kind=NodeKind.COMMENT, data=data))

    def close(self):
        super().close()
        self._stack.clear()


def parse_markup(html: str) -> List[ParsedNode]:
    """
    Разобрать разметку на узлы верхнего уровня.

    Raises:
        MarkupParseError: ошибка токенизатора
    """
    parser = MarkupParser()
    try:
        parser.feed(html)
        parser.close()
    except Exception as e:
        raise MarkupParseError(f"Failed to parse markup: {e}", snippet=html) from e
    return parser.roots
