"""Модуль конфигурации движка каталога.

Читает переменные окружения (с подгрузкой .env из корня проекта),
проверяет адрес API каталога и числовые параметры конвейера
и собирает их в иммутабельный объект Settings.

Все ошибки валидации накапливаются и выдаются одним
ConfigValidationError, чтобы исправить .env за один проход.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from dotenv import load_dotenv

T = TypeVar("T")

DEFAULT_PAGE_SIZE: int = 24
DEFAULT_PRICE_CEILING: float = 1000.0

_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_env() -> None:
    """Подгружает .env из корня проекта, не трогая уже заданные переменные."""
    env_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=env_path)


class ConfigValidationError(Exception):
    """Некорректная или неполная конфигурация.

    Сообщение перечисляет все найденные проблемы.
    """


@dataclass(frozen=True)
class CatalogApiSettings:
    """Настройки подключения к API каталога.

    Attributes:
        base_url: Базовый URL бэкенда (без завершающего слэша).
        api_token: Bearer-токен (пустая строка — без авторизации).
        timeout: Общий таймаут HTTP-запроса в секундах.
    """

    base_url: str
    api_token: str
    timeout: float


@dataclass(frozen=True)
class PipelineSettings:
    """Настройки конвейера фильтрации и пагинации.

    Attributes:
        page_size: Количество товаров на странице.
        price_ceiling: Верхняя граница ценового диапазона по умолчанию.
        search_debounce: Пауза тишины для поискового запроса (сек).
        filter_debounce: Пауза тишины для изменений фасетов (сек).
        edit_product_id: Товар, загружаемый для редактирования при запуске
            (пустая строка — не загружать).
    """

    page_size: int
    price_ceiling: float
    search_debounce: float
    filter_debounce: float
    edit_product_id: str = ""


@dataclass(frozen=True)
class DatabaseSettings:
    """Настройки хранилища пресетов фильтров.

    Attributes:
        db_path: Путь к файлу SQLite.
    """

    db_path: str


@dataclass(frozen=True)
class LogSettings:
    """Параметры вывода логов.

    Attributes:
        level: Имя уровня в верхнем регистре.
        file_path: Файл для дублирования логов; пустая строка — только stdout.
    """

    level: str
    file_path: str


@dataclass(frozen=True)
class Settings:
    """Корневой объект конфигурации.

    Attributes:
        api: Настройки API каталога.
        pipeline: Настройки конвейера.
        database: Настройки хранилища пресетов.
        log: Настройки вывода логов.
    """

    api: CatalogApiSettings
    pipeline: PipelineSettings
    database: DatabaseSettings
    log: LogSettings


# --- Разбор и проверки отдельных значений ---

def _to_int(raw: str, name: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigValidationError(f"{name}: ожидается целое число, а не '{raw}'")


def _to_float(raw: str, name: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise ConfigValidationError(f"{name}: ожидается число, а не '{raw}'")


def _to_url(raw: str, name: str) -> str:
    """Требует непустой http(s)-адрес и убирает завершающий слэш."""
    value = raw.strip()
    if not value:
        raise ConfigValidationError(
            f"{name}: переменная обязательна. Задайте её в .env (образец — .env.example)."
        )
    if not value.startswith(("http://", "https://")):
        raise ConfigValidationError(f"{name}: нужен адрес http:// или https://, а не '{value}'")
    return value.rstrip("/")


def _to_log_level(raw: str, name: str) -> str:
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigValidationError(
            f"{name}: уровень '{raw}' не поддерживается "
            f"(варианты: {', '.join(_LOG_LEVELS)})"
        )
    return level


def _positive(parse: Callable[[str, str], T]) -> Callable[[str, str], T]:
    def parser(raw: str, name: str) -> T:
        value = parse(raw, name)
        if value <= 0:
            raise ConfigValidationError(f"{name}: значение должно быть больше нуля, получено {value}")
        return value

    return parser


def _non_negative(parse: Callable[[str, str], T]) -> Callable[[str, str], T]:
    def parser(raw: str, name: str) -> T:
        value = parse(raw, name)
        if value < 0:
            raise ConfigValidationError(f"{name}: отрицательное значение {value} недопустимо")
        return value

    return parser


class _EnvReader:
    """Читает переменные окружения, копя ошибки вместо немедленного выхода.

    Attributes:
        errors: Сообщения обо всех найденных проблемах.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []

    def read(
        self,
        name: str,
        default: str,
        parse: Callable[[str, str], T],
        fallback: T,
    ) -> T:
        """Разбирает переменную name; при ошибке запоминает её и отдаёт fallback."""
        try:
            return parse(os.getenv(name, default), name)
        except ConfigValidationError as e:
            self.errors.append(str(e))
            return fallback

    def text(self, name: str, default: str = "") -> str:
        return os.getenv(name, default).strip()


def load_settings() -> Settings:
    """Загружает и валидирует все настройки.

    Returns:
        Полностью валидированный объект Settings.

    Raises:
        ConfigValidationError: Если хотя бы одна переменная отсутствует
            или некорректна; сообщение содержит все проблемы.
    """
    _load_env()
    env = _EnvReader()

    api = CatalogApiSettings(
        base_url=env.read("CATALOG_API_URL", "", _to_url, ""),
        api_token=env.text("CATALOG_API_TOKEN"),
        timeout=env.read("CATALOG_API_TIMEOUT", "30", _positive(_to_float), 30.0),
    )

    pipeline = PipelineSettings(
        page_size=env.read(
            "PAGE_SIZE", str(DEFAULT_PAGE_SIZE), _positive(_to_int), DEFAULT_PAGE_SIZE
        ),
        price_ceiling=env.read(
            "PRICE_CEILING",
            str(DEFAULT_PRICE_CEILING),
            _positive(_to_float),
            DEFAULT_PRICE_CEILING,
        ),
        search_debounce=env.read("SEARCH_DEBOUNCE", "0.3", _non_negative(_to_float), 0.3),
        filter_debounce=env.read("FILTER_DEBOUNCE", "0.5", _non_negative(_to_float), 0.5),
        edit_product_id=env.text("CATALOG_EDIT_PRODUCT_ID"),
    )

    database = DatabaseSettings(
        db_path=env.text("PRESETS_DB_PATH", "data/catalog_presets.db"),
    )

    log = LogSettings(
        level=env.read("LOG_LEVEL", "INFO", _to_log_level, "INFO"),
        file_path=env.text("LOG_FILE_PATH"),
    )

    if env.errors:
        details = "\n".join(f"  * {message}" for message in env.errors)
        raise ConfigValidationError(f"Конфигурация содержит ошибки:\n{details}")

    return Settings(api=api, pipeline=pipeline, database=database, log=log)
