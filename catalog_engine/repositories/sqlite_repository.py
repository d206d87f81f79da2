"""SQLite-реализация key-value хранилища.

Хранит значения JSON-строками в одной таблице kv_store
с upsert-логикой по ключу и временем последнего обновления.
"""

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from catalog_engine.config import get_logger
from catalog_engine.repositories.base import BaseKeyValueStore

logger = get_logger("sqlite_repository")


class SQLiteKeyValueStore(BaseKeyValueStore):
    """Key-value хранилище на базе SQLite.

    Attributes:
        _db_path: Путь к файлу базы данных (':memory:' — в памяти).
        _connection: Активное соединение с SQLite.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._connection: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Возвращает активное соединение, создавая его при первом вызове.

        Raises:
            RuntimeError: Если не удалось установить соединение.
        """
        if self._connection is None:
            try:
                if self._db_path != ":memory:":
                    Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

                self._connection = sqlite3.connect(self._db_path)
                self._connection.row_factory = sqlite3.Row

                logger.info("database_connected", db_path=self._db_path)
            except sqlite3.Error as e:
                logger.error(
                    "database_connection_failed",
                    exc_info=True,
                    db_path=self._db_path,
                    error=str(e),
                )
                raise RuntimeError(
                    f"Не удалось подключиться к БД: {self._db_path}"
                ) from e
        return self._connection

    def initialize(self) -> None:
        """Создаёт таблицу kv_store, если её ещё нет."""
        conn = self._get_connection()

        create_table = """
        CREATE TABLE IF NOT EXISTS kv_store (
            key         TEXT PRIMARY KEY,
            value       TEXT NOT NULL,
            updated_at  TEXT NOT NULL
        )
        """

        try:
            conn.execute(create_table)
            conn.commit()
            logger.info("database_initialized", db_path=self._db_path)
        except sqlite3.Error as e:
            logger.error("database_init_failed", exc_info=True, error=str(e))
            raise RuntimeError("Не удалось инициализировать таблицу kv_store") from e

    def load(self, key: str) -> Any | None:
        conn = self._get_connection()
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning("stored_value_corrupted", key=key)
            return None

    def save(self, key: str, value: Any) -> None:
        conn = self._get_connection()
        payload = json.dumps(value, ensure_ascii=False, sort_keys=True)
        conn.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, payload, datetime.now(timezone.utc).isoformat()),
        )
        conn.commit()
        logger.debug("value_saved", key=key)

    def delete(self, key: str) -> bool:
        conn = self._get_connection()
        cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        conn.commit()
        return cursor.rowcount > 0

    def keys(self, prefix: str = "") -> list[str]:
        conn = self._get_connection()
        # Экранируем спецсимволы LIKE в префиксе
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = conn.execute(
            "SELECT key FROM kv_store WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
            (f"{escaped}%",),
        ).fetchall()
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Закрывает соединение с базой данных."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("database_closed", db_path=self._db_path)
