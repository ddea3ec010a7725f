# ==============================================================================
# Configuration module for translation settings
# Модуль конфигурации для настроек перевода
# ==============================================================================
# This file manages configuration settings for translating documents.
# It loads settings from a YAML file and allows environment variables to override them.
#
# Этот файл управляет настройками конфигурации для перевода документов.
# Он загружает настройки из YAML-файла и позволяет переменным окружения переопределять их.
# ==============================================================================

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml

from pydantic import BaseModel, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .prompts import TranslationMode

logger = logging.getLogger(__name__)


# ==============================================================================
# Main configuration class for translation runs
# Основной класс конфигурации для запусков перевода
# ==============================================================================
class TranslateConfig(BaseModel):
    """
    Configuration parameters for a translation run.
    Параметры конфигурации для запуска перевода.
    """

    # Translation direction: "en2ja" or "ja2en"
    # Направление перевода: "en2ja" или "ja2en"
    mode: str = "en2ja"

    # Comma-separated glob patterns used when a target is a directory
    # Шаблоны файлов через запятую, применяются к директориям
    file_pattern: str = "*.adoc"

    # Chat model used as the translation engine
    # Модель чата, используемая как движок перевода
    llm_model: str = "gpt-4o-mini"
    temperature: float = 0.0

    # Extra attempts after a failed translation request
    # Дополнительные попытки после неудачного запроса перевода
    max_retries: int = 2

    # Paragraphs above this size are refused instead of being truncated
    # Абзацы больше этого размера отклоняются, а не обрезаются
    max_input_tokens: int = 6000

    # Directory for per-file JSONL run logs (None = no logs)
    # Директория для JSONL-журналов по файлам (None = без журналов)
    report_dir: Optional[str] = None

    @field_validator("mode")
    @classmethod
    def _check_mode(cls, value: str) -> str:
        TranslationMode.parse(value)
        return value.lower()

    @property
    def translation_mode(self) -> TranslationMode:
        return TranslationMode.parse(self.mode)


# ==============================================================================
# Environment variable overrides class
# Класс переопределений через переменные окружения
# ==============================================================================
class EnvTranslateOverrides(BaseSettings):
    """
    Allows overriding configuration using environment variables.
    Позволяет переопределять конфигурацию через переменные окружения.

    Example: Set BT_MODE=ja2en to change the translation direction.
    Пример: Установите BT_MODE=ja2en чтобы изменить направление перевода.
    """

    model_config = SettingsConfigDict(
        env_prefix="BT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    mode: Optional[str] = None
    file_pattern: Optional[str] = None
    llm_model: Optional[str] = None
    temperature: Optional[float] = None
    max_retries: Optional[int] = None
    max_input_tokens: Optional[int] = None
    report_dir: Optional[str] = None


def _resolve_default_config_path() -> Path:
    """
    Find configs/translate.yaml by searching upward from current file.
    Найти configs/translate.yaml, поднимаясь вверх от текущего файла.
    """
    start = Path(__file__).resolve()
    for p in [start] + list(start.parents):
        cand = p / "configs" / "translate.yaml"
        if cand.exists():
            return cand
    return Path("configs/translate.yaml")


# Default path to the configuration file
# Путь по умолчанию к конфигурационному файлу
DEFAULT_CONFIG_PATH = _resolve_default_config_path()


def load_translate_config(path: Optional[str | Path] = None) -> TranslateConfig:
    """
    Load configuration from YAML file and apply environment variable overrides.
    Загрузить конфигурацию из YAML-файла и применить переопределения из переменных окружения.

    Priority / Приоритет (highest to lowest / от высшего к низшему):
        1. Environment variables (BT_*) / Переменные окружения (BT_*)
        2. YAML file settings / Настройки из YAML-файла
        3. Default values in TranslateConfig / Значения по умолчанию в TranslateConfig

    Raises / Исключения:
        ConfigError: YAML is malformed or a value fails validation
    """
    file_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    if not file_path.exists():
        logger.info("translate.yaml not found at %s, using defaults", file_path)
        data = {}
    else:
        logger.debug("Loading config: %s", file_path)
        try:
            with file_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Malformed config {file_path}: {exc}", code="bad_yaml") from exc

    # Extract the 'translate' section, or use the whole dict if no section exists
    # Извлекаем секцию 'translate', или используем весь словарь, если секции нет
    params = data.get("translate", data) if isinstance(data, dict) else {}

    try:
        cfg = TranslateConfig(**params)
        override_dict = EnvTranslateOverrides().model_dump(exclude_none=True)
        if override_dict:
            # model_validate re-runs the validators on overridden values
            cfg = TranslateConfig.model_validate({**cfg.model_dump(), **override_dict})
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}", code="invalid_config") from exc

    return cfg
