"""
Поддерево DisplayNode -> rich text Qt для QLabel.

Ссылки выводятся с ключом узла в href, а обработчики собираются в `links`,
чтобы метка могла вернуть сигнал linkActivated нужному обработчику.
"""

import html as html_module
from typing import Dict, List, Mapping, Optional

from htmlview.models import ContainerKind, DisplayNode, InteractionHandlers, NodeStyle, StyleKey
from htmlview.styles import STYLE_TABLE, style_for, to_css


def to_rich_text(
    node: DisplayNode,
    styles: Mapping[StyleKey, NodeStyle] = STYLE_TABLE,
    dark: bool = False,
    links: Optional[Dict[str, InteractionHandlers]] = None
) -> str:
    """Вывести один узел (вместе с поддеревом) как rich text."""
    style = style_for(node.style_key, styles)
    css = to_css(style, dark)

    if node.is_leaf:
        inner = html_module.escape(node.content, quote=False)
    else:
        inner = "".join(to_rich_text(child, styles, dark, links) for child in node.content)

    if node.handlers is not None:
        if links is not None:
            links[node.key] = node.handlers
        return f'<a href="{node.key}" style="{css}">{inner}</a>'

    tag = "div" if style.block else "span"
    return f'<{tag} style="{css}">{inner}</{tag}>'


def contains_scroll(node: DisplayNode) -> bool:
    """Есть ли в поддереве прокручиваемый контейнер."""
    return any(n.container == ContainerKind.SCROLL for n in node.iter_nodes())


def split_at_scroll(node: DisplayNode) -> List[DisplayNode]:
    """
    Разрезать узел на части, каждая из которых рисуется отдельным виджетом.

    QLabel не умеет вложенную прокрутку, поэтому каждый прокручиваемый
    контейнер на любой глубине становится отдельной частью. Дети между
    ними собираются в куски со стилем и обработчиками исходного узла.
    Поддерево без прокрутки возвращается как есть.
    """
    if node.container == ContainerKind.SCROLL or not contains_scroll(node):
        return [node]

    pieces: List[DisplayNode] = []
    run: List[DisplayNode] = []

    def flush():
        if run:
            pieces.append(DisplayNode(
                key=f"{node.key}.{len(pieces)}",
                style_key=node.style_key,
                content=list(run),
                handlers=node.handlers,
            ))
            run.clear()

    for child in node.content:
        if contains_scroll(child):
            flush()
            pieces.extend(split_at_scroll(child))
        else:
            run.append(child)
    flush()
    return pieces
