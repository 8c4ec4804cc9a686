"""
Исключения для htmlview.
"""

from typing import Optional, Dict, Any


class HtmlViewError(Exception):
    """Базовое исключение для htmlview."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class MarkupParseError(HtmlViewError):
    """Разметку не удалось разобрать."""

    def __init__(self, message: str = "Markup parse failed", snippet: str = "", details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if snippet:
            details.setdefault("snippet", snippet[:200])
        super().__init__(message, details)


class ConfigError(HtmlViewError):
    """Недопустимое значение конфигурации."""
    pass
