"""
Хранение конфигурации просмотрщика.

Хранится в JSON в директории внутри домашней директории пользователя.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from htmlview.exceptions import ConfigError
from htmlview.models import ViewerConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Менеджер конфигурации просмотрщика."""

    CONFIG_DIR_NAME = ".htmlview"
    CONFIG_FILE_NAME = "config.json"

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Args:
            config_dir: Путь к директории конфигурации.
                        По умолчанию ~/.htmlview/
        """
        if config_dir is None:
            self.config_dir = Path.home() / self.CONFIG_DIR_NAME
        else:
            self.config_dir = Path(config_dir)

        self.config_file = self.config_dir / self.CONFIG_FILE_NAME
        self._config: Optional[ViewerConfig] = None

    def _ensure_config_dir(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load(self) -> ViewerConfig:
        """
        Загрузить конфигурацию из файла.

        Returns:
            Конфигурация просмотрщика (по умолчанию, если файла нет или он повреждён)
        """
        if self._config is not None:
            return self._config

        if not self.config_file.exists():
            self._config = ViewerConfig()
            return self._config

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._config = ViewerConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            # Файл повреждён - начинаем с настроек по умолчанию
            logger.warning(f"Ignoring invalid config file {self.config_file}: {e}")
            self._config = ViewerConfig()

        return self._config

    def save(self, config: Optional[ViewerConfig] = None) -> None:
        """
        Сохранить конфигурацию в файл.

        Args:
            config: Конфигурация для сохранения. По умолчанию текущая.
        """
        if config is not None:
            self._config = config

        if self._config is None:
            return

        try:
            self._ensure_config_dir()
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self._config.model_dump(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Error saving config to {self.config_file}: {e}")

    def get_config(self) -> ViewerConfig:
        """Текущая конфигурация."""
        if self._config is None:
            return self.load()
        return self._config

    def _update(self, **changes) -> ViewerConfig:
        data = self.get_config().model_dump()
        data.update(changes)
        try:
            config = ViewerConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration value: {changes}", {"errors": e.errors()}) from e
        self.save(config)
        return config

    def set_linkify(self, enabled: bool) -> None:
        """Флаг linkify по умолчанию для видов, которые его не передают."""
        self._update(linkify=enabled)

    def set_dark_mode(self, enabled: bool) -> None:
        self._update(dark_mode=enabled)

    def set_pre_max_height_ratio(self, ratio: float) -> None:
        """
        Args:
            ratio: Доля высоты экрана, в (0, 1]

        Raises:
            ConfigError: значение вне диапазона
        """
        self._update(pre_max_height_ratio=ratio)

    def reset(self) -> None:
        """Сбросить настройки по умолчанию."""
        self.save(ViewerConfig())


# Глобальный экземпляр менеджера конфигурации
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """
    Получить глобальный менеджер конфигурации.

    Args:
        config_dir: Путь к директории конфигурации (заменяет текущий экземпляр)
    """
    global _config_manager

    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)

    return _config_manager
