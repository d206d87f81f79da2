"""Пакет хранилищ состояния интерфейса.

Предоставляет абстракцию и реализацию key-value хранилища:
    from catalog_engine.repositories import BaseKeyValueStore, SQLiteKeyValueStore
"""

from catalog_engine.repositories.base import BaseKeyValueStore
from catalog_engine.repositories.sqlite_repository import SQLiteKeyValueStore

__all__ = [
    "BaseKeyValueStore",
    "SQLiteKeyValueStore",
]
