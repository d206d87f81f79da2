"""Debounce для быстро меняющихся входных значений.

Поисковая строка и «отпечаток» набора фильтров меняются на каждое
нажатие клавиши или клик. QueryDebouncer пропускает дальше только
последнее значение и только после паузы тишины заданной длины.

Каждый экземпляр владеет собственным таймером, поэтому независимые
сигналы (поиск, фасеты, SEO-параметры) не сбрасывают друг друга.

Пример использования:
    debouncer = QueryDebouncer(0.3, on_search, name="search")
    debouncer.push("sne")
    debouncer.push("sneakers")   # on_search("sneakers") через 0.3 с
    ...
    debouncer.cancel()           # при завершении работы компонента
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

from catalog_engine.config import get_logger

logger = get_logger("query_debouncer")

T = TypeVar("T")

_NOTHING: Any = object()


class QueryDebouncer(Generic[T]):
    """Откладывает передачу значения до паузы тишины.

    Attributes:
        _delay: Длительность паузы тишины в секундах.
        _callback: Получатель последнего значения (sync или async).
        _name: Имя сигнала для логов.
        _handle: Запланированный таймер или None.
        _pending: Последнее значение, ожидающее передачи.
        _last_emitted: Последнее переданное значение.
        _tasks: Запущенные асинхронные вызовы callback.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[T], Awaitable[None] | None],
        name: str = "query",
    ) -> None:
        if delay < 0:
            raise ValueError("delay не может быть отрицательным")
        self._delay = delay
        self._callback = callback
        self._name = name
        self._handle: asyncio.TimerHandle | None = None
        self._pending: Any = _NOTHING
        self._last_emitted: Any = _NOTHING
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        """Есть ли значение, ожидающее передачи."""
        return self._handle is not None

    def push(self, value: T) -> None:
        """Принимает новое значение и перезапускает паузу тишины.

        Должен вызываться из работающего event loop.
        """
        self._pending = value
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        """Отменяет ожидающую передачу; отменённое значение не будет передано."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("debounce_cancelled", signal=self._name)
        self._pending = _NOTHING

    def flush(self) -> None:
        """Немедленно передаёт ожидающее значение, не дожидаясь паузы."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    async def drain(self) -> None:
        """Дожидается завершения запущенных асинхронных вызовов callback.

        Ошибки callback не выбрасываются: они уже залогированы
        в _on_task_done.
        """
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_task_done(self, task: "asyncio.Task[None]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "debounce_callback_failed",
                signal=self._name,
                error=str(exc),
                error_type=type(exc).__name__,
            )

    def _fire(self) -> None:
        self._handle = None
        value, self._pending = self._pending, _NOTHING
        if value is _NOTHING:
            return
        if self._last_emitted is not _NOTHING and value == self._last_emitted:
            logger.debug("debounce_unchanged", signal=self._name)
            return
        self._last_emitted = value

        logger.debug("debounce_emitted", signal=self._name)
        result = self._callback(value)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)
