"""Пагинация коллекции товаров.

Два режима:
    - локальный: paginate() режет отсортированную коллекцию
      и сам считает метаданные;
    - серверный: resolve_pagination() берёт метаданные бэкенда,
      которые полностью замещают локальный расчёт.

PageCursor хранит текущую страницу между запросами; переход
на несуществующую страницу (< 1 или > total_pages) игнорируется.
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from catalog_engine.config import DEFAULT_PAGE_SIZE, get_logger
from catalog_engine.models import PaginationMeta
from catalog_engine.utils.fields import FieldExtractor, as_boolean, as_number

logger = get_logger("paginator")

T = TypeVar("T")

_page_field = FieldExtractor(("page", "currentPage", "current_page"), as_number)
_total_pages_field = FieldExtractor(("totalPages", "total_pages", "pages"), as_number)
_total_items_field = FieldExtractor(
    ("totalItems", "total_items", "total", "count"), as_number
)
_has_next_field = FieldExtractor(("hasNext", "has_next"), as_boolean)
_has_prev_field = FieldExtractor(("hasPrev", "has_prev"), as_boolean)
_page_size_field = FieldExtractor(("limit", "pageSize", "page_size", "perPage", "per_page"), as_number)


def count_pages(total_items: int, page_size: int) -> int:
    """Число страниц; пустая коллекция — одна пустая страница."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total_items / page_size))


def build_meta(page: int, total_pages: int, total_items: int) -> PaginationMeta:
    return PaginationMeta(
        page=page,
        total_pages=total_pages,
        total_items=total_items,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def paginate(
    items: Sequence[T],
    page: int,
    page_size: int,
) -> tuple[tuple[T, ...], PaginationMeta]:
    """Возвращает срез страницы и её метаданные.

    Номер страницы зажимается в [1, total_pages], поэтому срез
    за пределами коллекции невозможен.

    Args:
        items: Отсортированная коллекция.
        page: Запрошенная страница (с 1).
        page_size: Размер страницы; неположительный заменяется
            на DEFAULT_PAGE_SIZE.

    Returns:
        Кортеж (элементы страницы, метаданные).
    """
    if page_size <= 0:
        logger.debug("page_size_invalid", page_size=page_size, fallback=DEFAULT_PAGE_SIZE)
        page_size = DEFAULT_PAGE_SIZE

    total_items = len(items)
    total_pages = count_pages(total_items, page_size)
    current = min(max(page, 1), total_pages)

    start = (current - 1) * page_size
    page_items = tuple(items[start:start + page_size])
    return page_items, build_meta(current, total_pages, total_items)


def parse_server_pagination(
    raw: Any,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PaginationMeta | None:
    """Разбирает метаданные пагинации бэкенда.

    Принимает camelCase и snake_case ключи. Если total_pages не пришёл,
    он считается из total_items и размера страницы (limit из ответа
    или page_size запроса). Отсутствующие флаги has_next / has_prev
    вычисляются из page и total_pages.

    Args:
        raw: Поле pagination из ответа бэкенда.
        page_size: Размер страницы запроса.

    Returns:
        PaginationMeta или None, если raw не похож на метаданные.
    """
    if not isinstance(raw, Mapping):
        return None

    total_pages_raw = _total_pages_field(raw)
    total_items_raw = _total_items_field(raw)
    if total_pages_raw is None and total_items_raw is None:
        return None

    page = max(1, int(_page_field.or_default(raw, 1)))
    total_items = max(0, int(total_items_raw or 0))
    if total_pages_raw is not None:
        total_pages = max(1, int(total_pages_raw))
    else:
        size = int(_page_size_field.or_default(raw, page_size))
        total_pages = count_pages(total_items, size if size > 0 else DEFAULT_PAGE_SIZE)

    has_next = _has_next_field(raw)
    has_prev = _has_prev_field(raw)
    return PaginationMeta(
        page=page,
        total_pages=total_pages,
        total_items=total_items,
        has_next=page < total_pages if has_next is None else has_next,
        has_prev=page > 1 if has_prev is None else has_prev,
    )


def resolve_pagination(
    server_meta: Any,
    current_page: int,
    items: Sequence[Any],
    page_size: int = DEFAULT_PAGE_SIZE,
) -> PaginationMeta:
    """Выбирает метаданные страницы для серверного режима.

    Если бэкенд прислал метаданные, они используются целиком
    и без изменений. Иначе текущая страница считается единственной.

    Args:
        server_meta: Поле pagination из ответа бэкенда (или None).
        current_page: Запрошенная страница.
        items: Товары, полученные на этой странице.
        page_size: Размер страницы запроса.
    """
    parsed = parse_server_pagination(server_meta, page_size)
    if parsed is not None:
        return parsed

    logger.debug("server_pagination_missing", page=current_page, items_count=len(items))
    return PaginationMeta(
        page=current_page,
        total_pages=1,
        total_items=len(items),
        has_next=False,
        has_prev=current_page > 1,
    )


def page_window(current: int, total: int, max_visible: int = 5) -> list[int | None]:
    """Номера страниц для панели навигации; None — многоточие.

    Первая и последняя страницы видны всегда, вокруг текущей —
    по одной соседней.

    Пример:
        page_window(6, 10) -> [1, None, 5, 6, 7, None, 10]
    """
    if total <= max_visible:
        return list(range(1, total + 1))

    window: list[int | None] = [1]
    if current > 3:
        window.append(None)

    start = max(2, current - 1)
    end = min(total - 1, current + 1)
    window.extend(range(start, end + 1))

    if current < total - 2:
        window.append(None)
    window.append(total)
    return window


class PageCursor:
    """Текущая страница списка с защитой от выхода за границы.

    Attributes:
        _page: Текущая страница.
        _total_pages: Известное число страниц.
    """

    def __init__(self, page: int = 1, total_pages: int = 1) -> None:
        self._total_pages = max(1, total_pages)
        self._page = min(max(page, 1), self._total_pages)

    @property
    def page(self) -> int:
        return self._page

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def has_next(self) -> bool:
        return self._page < self._total_pages

    @property
    def has_prev(self) -> bool:
        return self._page > 1

    def go_to(self, page: int) -> bool:
        """Переходит на страницу; вне диапазона ничего не делает.

        Returns:
            True, если страница сменилась.
        """
        if page < 1 or page > self._total_pages:
            logger.debug(
                "page_out_of_range_ignored",
                requested_page=page,
                total_pages=self._total_pages,
            )
            return False
        changed = page != self._page
        self._page = page
        return changed

    def next(self) -> bool:
        return self.go_to(self._page + 1)

    def previous(self) -> bool:
        return self.go_to(self._page - 1)

    def reset(self) -> None:
        """Возврат на первую страницу (например, после смены фильтров)."""
        self._page = 1

    def update(self, meta: PaginationMeta) -> None:
        """Принимает новые метаданные; текущая страница не выходит за total_pages."""
        self._total_pages = max(1, meta.total_pages)
        if self._page > self._total_pages:
            self._page = self._total_pages
