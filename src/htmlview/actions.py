"""
Жесты по ссылкам, делегированные рабочему столу: открыть в браузере, поделиться.

PyQt6 импортируется лениво, чтобы компилятор работал и без дисплея.
"""

import logging

logger = logging.getLogger(__name__)


def open_browser(url: str) -> None:
    """Открыть URL в системном браузере (без ожидания результата)."""
    from PyQt6.QtCore import QUrl
    from PyQt6.QtGui import QDesktopServices

    logger.info(f"Opening link: {url}")
    if not QDesktopServices.openUrl(QUrl(url)):
        logger.warning(f"No handler could open: {url}")


def share_url(url: str) -> None:
    """Поделиться на десктопе: звуковой сигнал, затем URL в буфер обмена."""
    from PyQt6.QtWidgets import QApplication

    QApplication.beep()
    clipboard = QApplication.clipboard()
    if clipboard is None:
        logger.warning(f"Clipboard unavailable, cannot share: {url}")
        return
    clipboard.setText(url)
    logger.info(f"Link copied to clipboard: {url}")
