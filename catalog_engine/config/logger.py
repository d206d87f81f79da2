"""Структурированное JSON-логирование.

Каждая запись — одна JSON-строка с именем события, уровнем,
trace_id текущей операции, именем компонента и контекстными
полями. Логгер можно «привязать» к постоянному контексту
(например, product_id), чтобы не передавать его в каждый вызов.

Пример использования:
    logger = get_logger("reconciler")
    logger.info("stores_merged", product_id="p1", merged_count=3)

    edit_logger = logger.bind(product_id="p1")
    edit_logger.warning("stores_source_failed", error="timeout")

    with logger.stage("catalog_page") as stage:
        stage["products_count"] = 24   # -> stage_completed с duration_ms
"""

import json
import logging
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


# trace_id связывает записи одного запуска конвейера без явной передачи
_trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")


def set_trace_id(trace_id: str | None = None) -> str:
    """Устанавливает trace_id для текущего контекста выполнения.

    Args:
        trace_id: Идентификатор трассировки. Если None — первые
            8 символов нового UUID4.

    Returns:
        Установленный trace_id.
    """
    if trace_id is None:
        trace_id = uuid.uuid4().hex[:8]
    _trace_id_var.set(trace_id)
    return trace_id


def get_trace_id() -> str:
    """Возвращает trace_id текущего контекста (или пустую строку)."""
    return _trace_id_var.get()


class JSONFormatter(logging.Formatter):
    """Форматирует LogRecord в JSON-строку.

    Поля записи: timestamp (ISO 8601, UTC), level, event, trace_id,
    component и, если есть, context с дополнительными полями
    и сведениями об исключении.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "event": record.getMessage(),
            "trace_id": get_trace_id(),
            "component": record.name,
        }

        context: dict[str, Any] = dict(getattr(record, "context_data", {}) or {})

        if record.exc_info and record.exc_info[1] is not None:
            context["exception_type"] = type(record.exc_info[1]).__name__
            context["exception_message"] = str(record.exc_info[1])

        if context:
            entry["context"] = context

        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextLogger:
    """Обёртка над logging.Logger с контекстными полями.

    Ключевые аргументы методов логирования попадают в поле context
    JSON-вывода. Привязанный контекст (bind) добавляется к каждой
    записи; явные аргументы вызова имеют приоритет.

    Attributes:
        _logger: Стандартный логгер Python.
        _bound: Постоянные контекстные поля.
    """

    def __init__(
        self,
        logger: logging.Logger,
        bound: dict[str, Any] | None = None,
    ) -> None:
        self._logger = logger
        self._bound: dict[str, Any] = dict(bound or {})

    @property
    def name(self) -> str:
        """Имя компонента, к которому относится логгер."""
        return self._logger.name

    def bind(self, **fields: Any) -> "ContextLogger":
        """Возвращает новый логгер с дополнительным постоянным контекстом.

        Args:
            **fields: Поля, добавляемые к каждой записи.

        Returns:
            Новый ContextLogger поверх того же стандартного логгера.
        """
        return ContextLogger(self._logger, {**self._bound, **fields})

    def _log(
        self,
        level: int,
        event: str,
        exc_info: bool = False,
        **kwargs: Any,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        context = {**self._bound, **kwargs}
        self._logger.log(
            level, event, exc_info=exc_info, extra={"context_data": context}
        )

    def debug(self, event: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._log(logging.INFO, event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, event, **kwargs)

    def error(self, event: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.ERROR, event, exc_info=exc_info, **kwargs)

    def critical(self, event: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, event, exc_info=exc_info, **kwargs)

    @contextmanager
    def stage(self, stage: str, **fields: Any) -> Iterator[dict[str, Any]]:
        """Логирует длительность и итог этапа конвейера.

        При успешном выходе пишет stage_completed, при исключении
        stage_failed (исключение пробрасывается дальше). Тело блока
        может дополнить контекст итоговой записи через отдаваемый словарь.

        Args:
            stage: Имя этапа (catalog_page, edit_load, ...).
            **fields: Дополнительный контекст обеих записей.

        Yields:
            Изменяемый словарь с контекстом итоговой записи.
        """
        result: dict[str, Any] = dict(fields)
        started = time.perf_counter()
        try:
            yield result
        except Exception as e:
            self.error(
                "stage_failed",
                stage=stage,
                duration_ms=_elapsed_ms(started),
                error=str(e),
                error_type=type(e).__name__,
                **result,
            )
            raise
        self.info("stage_completed", stage=stage, duration_ms=_elapsed_ms(started), **result)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


# Реестр созданных логгеров по имени компонента.
_loggers: dict[str, ContextLogger] = {}


def setup_logging(level: str = "INFO", log_file_path: str = "") -> None:
    """Настраивает корневой логгер на JSON-вывод.

    Вызывается один раз при старте. Повторный вызов заменяет
    хендлеры, а не добавляет новые.

    Args:
        level: Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file_path: Путь к файлу логов. Пустая строка — только stdout.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter = JSONFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file_path:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_path), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> ContextLogger:
    """Возвращает именованный ContextLogger.

    Повторный вызов с тем же именем возвращает тот же экземпляр.

    Args:
        name: Имя компонента (например, 'record_normalizer').

    Returns:
        Экземпляр ContextLogger.
    """
    if name not in _loggers:
        _loggers[name] = ContextLogger(logging.getLogger(name))
    return _loggers[name]
