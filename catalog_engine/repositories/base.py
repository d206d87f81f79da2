"""Абстрактное key-value хранилище для состояния интерфейса.

Пресеты фильтров, черновики и шаблоны живут вне чистого конвейера:
их сохраняет и загружает слой интерфейса через это хранилище.
Сервисы зависят от абстракции, а не от конкретной реализации.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseKeyValueStore(ABC):
    """Контракт хранилища JSON-совместимых значений по строковому ключу."""

    @abstractmethod
    def initialize(self) -> None:
        """Подготавливает хранилище (создаёт таблицы и т.п.)."""

    @abstractmethod
    def load(self, key: str) -> Any | None:
        """Возвращает значение по ключу или None, если ключа нет.

        Args:
            key: Ключ записи.
        """

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """Сохраняет значение, перезаписывая существующее.

        Args:
            key: Ключ записи.
            value: JSON-совместимое значение.
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Удаляет запись.

        Returns:
            True, если запись существовала.
        """

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        """Возвращает отсортированные ключи с заданным префиксом."""

    @abstractmethod
    def close(self) -> None:
        """Освобождает ресурсы хранилища."""
