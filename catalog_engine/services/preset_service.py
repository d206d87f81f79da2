"""Сервис именованных пресетов фильтров.

Сохраняет и восстанавливает FilterState через внедрённое
key-value хранилище. Используется только слоем интерфейса;
чистый конвейер фильтрации о пресетах ничего не знает.
"""

from collections.abc import Mapping

from catalog_engine.config import get_logger
from catalog_engine.models import FilterState
from catalog_engine.repositories.base import BaseKeyValueStore

logger = get_logger("preset_service")

PRESET_KEY_PREFIX: str = "filter_preset:"


class FilterPresetService:
    """Сохранение, загрузка и перечисление пресетов фильтров.

    Attributes:
        _store: Key-value хранилище.
    """

    def __init__(self, store: BaseKeyValueStore) -> None:
        self._store = store

    def _key(self, name: str) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Имя пресета не может быть пустым")
        return f"{PRESET_KEY_PREFIX}{cleaned}"

    def save(self, name: str, filters: FilterState) -> None:
        """Сохраняет пресет; номер страницы не сохраняется.

        Raises:
            ValueError: Если имя пустое.
        """
        self._store.save(self._key(name), filters.with_page(1).to_dict())
        logger.info("filter_preset_saved", preset=name.strip())

    def load(self, name: str) -> FilterState | None:
        """Загружает пресет или возвращает None, если его нет."""
        data = self._store.load(self._key(name))
        if not isinstance(data, Mapping):
            return None
        return FilterState.from_dict(data)

    def delete(self, name: str) -> bool:
        deleted = self._store.delete(self._key(name))
        if deleted:
            logger.info("filter_preset_deleted", preset=name.strip())
        return deleted

    def list_names(self) -> list[str]:
        """Имена сохранённых пресетов в алфавитном порядке."""
        return [
            key[len(PRESET_KEY_PREFIX):]
            for key in self._store.keys(PRESET_KEY_PREFIX)
        ]
