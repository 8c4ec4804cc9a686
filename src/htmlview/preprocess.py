"""
Починка разметки перед разбором.

Фиксированный упорядоченный список регулярных замен, распутывающих
вложенность <p> и <pre> в реальном HTML комментариев.
Порядок важен: поздние правила рассчитывают на уже выполненные ранние.
"""

import re
from typing import List, NamedTuple, Optional, Pattern


class RepairRule(NamedTuple):
    """Одна замена; пропускается, если `unless` находится где-либо во входе."""
    name: str
    pattern: Pattern
    replacement: str
    unless: Optional[Pattern] = None


_LEADING_P = re.compile(r'^\s*<p>', re.IGNORECASE)


def _ensure_leading_paragraph(html: str) -> str:
    """Содержимое верхнего уровня оборачивается в абзац для поиска цитат."""
    if _LEADING_P.search(html):
        return html
    return '<p>' + html


RULES: List[RepairRule] = [
    # Начальный <p><pre>: <pre> никогда не лежит внутри <p>
    RepairRule(
        name="unwrap-leading-pre",
        pattern=re.compile(r'^\s*<p>\s*<pre>', re.IGNORECASE),
        replacement='<pre>',
    ),
    # То же самое в любом другом месте документа
    RepairRule(
        name="close-p-before-pre",
        pattern=re.compile(r'<p>\s*<pre>', re.IGNORECASE),
        replacement='</p><pre>',
    ),
    # Пробелы между <pre> и <code> превращаются в лишний текстовый узел
    RepairRule(
        name="join-pre-code",
        pattern=re.compile(r'<pre>\s*<code>', re.IGNORECASE),
        replacement='<pre><code>',
    ),
    # Текст после блока кода получает свой абзац
    RepairRule(
        name="paragraph-after-pre",
        pattern=re.compile(r'</pre>([^<])', re.IGNORECASE),
        replacement=r'</pre><p>\1',
        unless=re.compile(r'</pre>\s*<p>', re.IGNORECASE),
    ),
]


def normalize(html: str) -> str:
    """Применить правило абзаца, затем все правила починки по порядку."""
    html = _ensure_leading_paragraph(html)
    for rule in RULES:
        if rule.unless is not None and rule.unless.search(html):
            continue
        html = rule.pattern.sub(rule.replacement, html)
    return html
