"""Доменные модели каталога.

Содержит канонические формы сущностей после нормализации:
    - NormalizedStoreAssociation: «товар продаётся в магазине
      по такой цене с такими размерами»
    - NormalizedProduct: товар с каноническими категорией, цветом
      и списками таксономий

Обе модели иммутабельны: этапы конвейера возвращают новые
экземпляры и никогда не изменяют общие коллекции на месте.
"""

from dataclasses import dataclass, fields
from typing import Any

UNKNOWN_STORE_NAME: str = "Unknown Store"


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    """Убирает отсутствующие значения, превращает кортежи в списки."""
    result: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        result[key] = list(value) if isinstance(value, tuple) else value
    return result


@dataclass(frozen=True)
class NormalizedStoreAssociation:
    """Связка товара с магазином.

    Attributes:
        store_id: Идентификатор магазина (ключ слияния, не пустой).
        store_name: Название магазина; UNKNOWN_STORE_NAME, если не пришло.
        price: Цена в этом магазине; 0.0, если не удалось разобрать.
        sizes: Доступные размеры в исходном порядке (может быть пустым).
        currency: Явный код валюты от бэкенда, если он был передан.
        telegram_url: Ссылка на Telegram магазина.
        instagram_url: Ссылка на Instagram магазина.
        shipping_info: Условия доставки.
        logo_url: Ссылка на логотип магазина.
        is_recommended: Флаг «рекомендованный магазин».
    """

    store_id: str
    store_name: str = UNKNOWN_STORE_NAME
    price: float = 0.0
    sizes: tuple[str, ...] = ()
    currency: str | None = None
    telegram_url: str | None = None
    instagram_url: str | None = None
    shipping_info: str | None = None
    logo_url: str | None = None
    is_recommended: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Сериализует связку, опуская отсутствующие необязательные поля."""
        return _compact({f.name: getattr(self, f.name) for f in fields(self)})


@dataclass(frozen=True)
class NormalizedProduct:
    """Товар в канонической форме.

    Attributes:
        id: Идентификатор товара (не пустой).
        name: Название; пустая строка, если не пришло.
        category: Каноническая категория (см. normalize_category).
        color: Канонический цвет.
        gender: Пол в нижнем регистре (men, women, unisex).
        brand: Название бренда.
        brand_id: Идентификатор бренда.
        price: Цена товара (минимальная по магазинам, если так отдаёт API).
        currency: Явный код валюты.
        description: Описание (с учётом локализованных вариантов поля).
        materials: Материалы без повторов, в исходном порядке.
        technologies: Технологии без повторов.
        sizes: Размеры без повторов.
        stores: Связки с магазинами из детального ответа.
    """

    id: str
    name: str = ""
    category: str | None = None
    color: str | None = None
    gender: str | None = None
    brand: str | None = None
    brand_id: str | None = None
    price: float | None = None
    currency: str | None = None
    description: str | None = None
    materials: tuple[str, ...] = ()
    technologies: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    stores: tuple[NormalizedStoreAssociation, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Сериализует товар, опуская отсутствующие необязательные поля."""
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "stores"
        }
        result = _compact(data)
        result["stores"] = [store.to_dict() for store in self.stores]
        return result
