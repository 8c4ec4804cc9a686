"""
Таблица стилей: StyleKey -> NodeStyle.

Строится один раз при импорте и доступна только для чтения.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from htmlview.models import DynamicColor, NodeStyle, StyleKey


BASE_FONT_SIZE = 15
CODE_FONT_FAMILY = "Menlo"
LINK_COLOR = "#2980b9"

_SUBTLE_BACKGROUND = DynamicColor(
    light="rgba(0,0,0,.05)",
    dark="rgba(255,255,255,.05)",
)

_STYLES = {
    StyleKey.DEFAULT: NodeStyle(font_size=BASE_FONT_SIZE),
    StyleKey.P: NodeStyle(font_size=BASE_FONT_SIZE, margin_bottom=12, block=True),
    StyleKey.BLOCKQUOTE: NodeStyle(
        font_size=BASE_FONT_SIZE,
        margin_bottom=12,
        background=_SUBTLE_BACKGROUND,
        padding=8,
        opacity=0.8,
        block=True,
    ),
    StyleKey.PRE: NodeStyle(
        background=_SUBTLE_BACKGROUND,
        border_radius=4,
        margin_bottom=12,
        padding=10,
        white_space="pre-wrap",
        block=True,
    ),
    StyleKey.CODE: NodeStyle(
        font_family=CODE_FONT_FAMILY,
        font_size=BASE_FONT_SIZE - 2,
        white_space="pre-wrap",
    ),
    StyleKey.A: NodeStyle(color=LINK_COLOR, font_size=BASE_FONT_SIZE, underline=True),
    StyleKey.I: NodeStyle(italic=True, font_size=BASE_FONT_SIZE),
    StyleKey.EM: NodeStyle(italic=True, font_size=BASE_FONT_SIZE),
    StyleKey.B: NodeStyle(bold=True, font_size=BASE_FONT_SIZE),
    StyleKey.STRONG: NodeStyle(bold=True, font_size=BASE_FONT_SIZE),
    StyleKey.U: NodeStyle(underline=True, font_size=BASE_FONT_SIZE),
    StyleKey.S: NodeStyle(strike=True, font_size=BASE_FONT_SIZE),
}

STYLE_TABLE: Mapping[StyleKey, NodeStyle] = MappingProxyType(_STYLES)


def style_for(key: StyleKey, styles: Optional[Mapping[StyleKey, NodeStyle]] = None) -> NodeStyle:
    """Стиль для ключа; при отсутствии - стиль по умолчанию."""
    table = STYLE_TABLE if styles is None else styles
    return table.get(key) or table[StyleKey.DEFAULT]


def to_css(style: NodeStyle, dark: bool = False) -> str:
    """
    Inline CSS для rich text Qt.

    Движок rich text Qt игнорирует opacity и border-radius, поэтому opacity
    переносится в альфа-канал цвета текста, если цвет не задан явно.
    """
    rules = []
    if style.font_size is not None:
        rules.append(f"font-size:{style.font_size}px")
    if style.font_family:
        rules.append(f"font-family:'{style.font_family}',monospace")
    if style.italic:
        rules.append("font-style:italic")
    if style.bold:
        rules.append("font-weight:bold")
    decorations = []
    if style.underline:
        decorations.append("underline")
    if style.strike:
        decorations.append("line-through")
    if decorations:
        rules.append(f"text-decoration:{' '.join(decorations)}")
    if style.color:
        rules.append(f"color:{style.color}")
    elif style.opacity is not None:
        channel = 255 if dark else 0
        rules.append(f"color:rgba({channel},{channel},{channel},{style.opacity:g})")
    if style.background is not None:
        rules.append(f"background-color:{style.background.resolve(dark)}")
    if style.margin_bottom is not None:
        rules.append(f"margin-bottom:{style.margin_bottom}px")
    if style.padding is not None:
        rules.append(f"padding:{style.padding}px")
    if style.white_space:
        rules.append(f"white-space:{style.white_space}")
    return "; ".join(rules)
