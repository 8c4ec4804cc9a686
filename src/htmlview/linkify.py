"""
Необязательная расстановка ссылок в разметке с голым текстом.
"""

import html as html_module
import logging
import re

logger = logging.getLogger(__name__)

_ANCHOR_CLOSE = re.compile(r'</a>', re.IGNORECASE)

# Некоторые теги слишком "прилипают" к тексту перед ними
_STICKY_TAG = re.compile(r'(<\w)')

_IPV4_OCTET = r'(?:25[0-5]|2[0-4]\d|1\d\d|[1-9]?\d)'
_HOST_LABEL = r'[a-z0-9\u00a1-\uffff](?:[a-z0-9\u00a1-\uffff_-]{0,62}[a-z0-9\u00a1-\uffff])?'

# Строгий режим: нужен префикс scheme://, // или www., хост - IPv4 или
# доменное имя с буквенным TLD, поэтому голый "localhost" не совпадает.
# Совпадение начинается только на границе слова, иначе длинное слово
# без пробелов проверяется за квадратичное время.
URL_PATTERN = re.compile(
    r'(?<![a-z0-9+.-])'
    r'(?:(?:[a-z][a-z0-9+.-]*:)?//|www\.)'
    r'(?:[^\s:@/<>"\']+(?::[^\s@/<>"\']*)?@)?'
    r'(?:'
    rf'{_IPV4_OCTET}(?:\.{_IPV4_OCTET}){{3}}'
    r'|'
    rf'(?:{_HOST_LABEL}\.)+[a-z\u00a1-\uffff]{{2,63}}'
    r')'
    r'(?::\d{2,5})?'
    r'(?:[/?#](?:[^\s"\'<>)]*[^\s"\'<>).,?!])?)?',
    re.IGNORECASE,
)


def contains_anchor(html: str) -> bool:
    """Есть ли в разметке хотя бы одна закрытая ссылка."""
    return bool(_ANCHOR_CLOSE.search(html))


def find_urls(text: str):
    """Все URL в тексте по порядку."""
    return [m.group(0) for m in URL_PATTERN.finditer(text)]


def _wrap_url(m: re.Match) -> str:
    url = m.group(0)
    return f'<a href="{url}">{url}</a>'


def linkify_html(html: str) -> str:
    """
    Обернуть голые URL в ссылки.

    Если в разметке уже есть ссылки, шаг пропускается с предупреждением:
    авторские ссылки и автоссылки не смешиваются. Иначе порядок такой:
    раскодировать сущности -> отделить прилипшие теги -> обернуть URL.
    """
    if contains_anchor(html):
        logger.warning(f"HTML contains anchors and linkify=true: {html[:200]!r}")
        return html

    text = html_module.unescape(html)
    text = _STICKY_TAG.sub(r'\n\1', text)
    return URL_PATTERN.sub(_wrap_url, text)
