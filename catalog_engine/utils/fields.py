"""Толерантное извлечение полей из записей произвольной формы.

Ответы бэкенда называют одно и то же поле по-разному: store_id,
id или вложенный store.id. FieldExtractor описывает логическое поле
как упорядоченный список путей-кандидатов и функцию приведения типа;
результат — первое значение, которое функция приведения приняла.

Извлечение никогда не выбрасывает исключений: отсутствующий ключ,
не-словарь на месте вложенного объекта или неподходящий тип
означают «значения нет».

Пример использования:
    store_id = FieldExtractor(("store_id", "id", "store.id"), as_identifier)
    store_id({"store": {"id": 7}})  # -> "7"
"""

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_MISSING = object()

# Строки, которыми фронтенд и бэкенд обозначают отсутствующий идентификатор.
_ABSENT_IDENTIFIERS = frozenset({"undefined", "null", "none"})


def get_path(record: Any, path: str) -> Any:
    """Возвращает значение по пути через точку или None.

    Args:
        record: Запись произвольной формы.
        path: Ключ или путь вида 'store.name'.

    Returns:
        Найденное значение либо None, если на любом шаге
        запись не является словарём или ключ отсутствует.
    """
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return None
    return current


def as_present(value: Any) -> Any:
    """Принимает любое значение, кроме None."""
    return value


def as_string(value: Any) -> str | None:
    """Принимает непустую (после strip) строку."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped:
            return stripped
    return None


def as_identifier(value: Any) -> str | None:
    """Принимает непустую строку или целое число как идентификатор.

    Строки "undefined", "null" и "none" в любом регистре
    считаются отсутствием идентификатора.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    text = as_string(value)
    if text is None or text.lower() in _ABSENT_IDENTIFIERS:
        return None
    return text


def as_number(value: Any) -> float | None:
    """Принимает конечное число или строку, содержащую конечное число."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_mapping(value: Any) -> Mapping[str, Any] | None:
    """Принимает словарь."""
    return value if isinstance(value, Mapping) else None


def as_string_list(value: Any) -> list[str] | None:
    """Принимает список, все элементы которого — строки."""
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    return None


def as_boolean(value: Any) -> bool | None:
    """Принимает bool, а также 0/1 и строки 'true'/'false'."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    return None


@dataclass(frozen=True)
class FieldExtractor(Generic[T]):
    """Упорядоченный набор путей-кандидатов для одного логического поля.

    Attributes:
        paths: Пути в порядке приоритета.
        coerce: Приведение типа; None означает «кандидат не подходит».
    """

    paths: tuple[str, ...]
    coerce: Callable[[Any], T | None]

    def __call__(self, record: Any) -> T | None:
        for path in self.paths:
            value = get_path(record, path)
            if value is None:
                continue
            coerced = self.coerce(value)
            if coerced is not None:
                return coerced
        return None

    def or_default(self, record: Any, default: T) -> T:
        """Извлекает значение или возвращает default."""
        value = self(record)
        return default if value is None else value


def first_of(record: Any, paths: Iterable[str], coerce: Callable[[Any], T | None]) -> T | None:
    """Разовое извлечение без создания именованного экстрактора."""
    return FieldExtractor(tuple(paths), coerce)(record)
