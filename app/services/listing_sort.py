from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from sqlalchemy import ColumnElement, case

from app.models.listing import Listing

LOCAL_CURRENCY = "Gs."
# fixed guaraní -> USD factor used only for ordering
LOCAL_CURRENCY_PER_USD = 8000

DEFAULT_SORT_FIELD = "price_per_sqm_diff_percent"
DEFAULT_SORT_DIRECTION = "asc"


def normalized_price() -> ColumnElement:
    return case(
        (Listing.currency == LOCAL_CURRENCY, Listing.price / LOCAL_CURRENCY_PER_USD),
        else_=Listing.price,
    )


SORT_KEYS: dict[str, Callable[[], ColumnElement]] = {
    "price": normalized_price,
    "m2": lambda: Listing.m2,
    "created_at": lambda: Listing.created_at,
    "price_per_sqm_diff_percent": lambda: Listing.price_per_sqm_diff_percent,
    "sale_price_diff_percent": lambda: Listing.sale_price_diff_percent,
}

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class ListingSort:
    field: str = DEFAULT_SORT_FIELD
    direction: str = DEFAULT_SORT_DIRECTION

    @classmethod
    def from_raw(cls, field: str | None, direction: str | None) -> ListingSort:
        # an empty part takes its own default, the other part is still honoured
        f = (field or "").strip().lower() or DEFAULT_SORT_FIELD
        d = (direction or "").strip().lower() or DEFAULT_SORT_DIRECTION
        if f not in SORT_KEYS or d not in SORT_DIRECTIONS:
            # unknown combinations quietly fall back to best-deal-first
            return cls()
        return cls(field=f, direction=d)


def select_ordering(sort: ListingSort | None = None) -> list[ColumnElement]:
    """ORDER BY clauses for a sort request; always ends with id ASC so pages are stable."""
    sort = ListingSort.from_raw(sort.field, sort.direction) if sort else ListingSort()
    key = SORT_KEYS[sort.field]()
    primary = key.desc() if sort.direction == "desc" else key.asc()
    return [primary.nulls_last(), Listing.id.asc()]
