from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, and_, or_

from app.models.listing import LAND_PLOT_TYPE, Listing
from app.services.deal_category import get_deal_category

# values the UI sends for "no constraint"
SENTINELS = frozenset({"", "all", "any"})


@dataclass(frozen=True)
class MapBounds:
    south: float
    west: float
    north: float
    east: float


@dataclass(frozen=True)
class ListingFilters:
    search: str | None = None
    zone: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_m2: float | None = None
    max_m2: float | None = None
    sold: bool | None = None
    bounds: MapBounds | None = None
    deal: str | None = None

    @classmethod
    def from_raw(
        cls,
        *,
        search: Any = None,
        zone: Any = None,
        min_price: Any = None,
        max_price: Any = None,
        min_m2: Any = None,
        max_m2: Any = None,
        sold: Any = None,
        north: Any = None,
        south: Any = None,
        east: Any = None,
        west: Any = None,
        deal: Any = None,
    ) -> ListingFilters:
        """
        Build filters from loosely typed request input.
        Missing, unparseable and sentinel values mean "no constraint"; nothing here raises.
        """
        bounds = None
        edges = [_number(v) for v in (south, west, north, east)]
        if all(e is not None for e in edges):
            bounds = MapBounds(*edges)

        deal_text = _text(deal)
        return cls(
            search=_text(search),
            zone=_exact(zone),
            min_price=_number(min_price),
            max_price=_number(max_price),
            min_m2=_number(min_m2),
            max_m2=_number(max_m2),
            sold=_flag(sold),
            bounds=bounds,
            deal=deal_text.lower() if deal_text and get_deal_category(deal_text) else None,
        )

    def is_empty(self) -> bool:
        return self == ListingFilters()


def _text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    if s.lower() in SENTINELS:
        return None
    return s


def _exact(value: Any) -> str | None:
    # sentinel check on the trimmed text, but keep the value verbatim for equality
    if value is None or _text(value) is None:
        return None
    return str(value)


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(float(value))
    s = str(value).strip()
    if s.lower() in SENTINELS:
        return None
    try:
        return _finite(float(s))
    except ValueError:
        return None


def _finite(value: float) -> float | None:
    # nan and inf would turn a bound into "match nothing"
    return value if math.isfinite(value) else None


def _flag(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in SENTINELS:
        return None
    return s == "true"


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def domain_clauses() -> list[ColumnElement[bool]]:
    # always enforced, never user controlled
    return [
        Listing.property_type == LAND_PLOT_TYPE,
        Listing.blacklisted.is_(False),
    ]


def mappable_clause() -> ColumnElement[bool]:
    return and_(
        Listing.latitude.is_not(None),
        Listing.longitude.is_not(None),
        Listing.latitude != 0,
        Listing.longitude != 0,
    )


def build_listing_predicate(filters: ListingFilters | None) -> list[ColumnElement[bool]]:
    """
    Compose the WHERE clauses for a filter set. Each present filter adds one
    independent clause; the caller AND-s them via select(...).where(*clauses).
    """
    clauses = domain_clauses()
    if filters is None:
        return clauses

    if filters.search:
        pattern = _like_pattern(filters.search)
        clauses.append(
            or_(
                Listing.title.ilike(pattern, escape="\\"),
                Listing.address.ilike(pattern, escape="\\"),
                Listing.description_short.ilike(pattern, escape="\\"),
            )
        )

    if filters.zone:
        clauses.append(Listing.zone == filters.zone)

    if filters.min_price is not None:
        clauses.append(Listing.price >= filters.min_price)
    if filters.max_price is not None:
        clauses.append(Listing.price <= filters.max_price)
    if filters.min_m2 is not None:
        clauses.append(Listing.m2 >= filters.min_m2)
    if filters.max_m2 is not None:
        clauses.append(Listing.m2 <= filters.max_m2)

    if filters.sold is not None:
        clauses.append(Listing.sold.is_(filters.sold))

    if filters.bounds is not None:
        b = filters.bounds
        clauses.append(Listing.latitude.between(b.south, b.north))
        clauses.append(Listing.longitude.between(b.west, b.east))

    if filters.deal:
        cat = get_deal_category(filters.deal)
        if cat is not None:
            if cat.lower is not None:
                clauses.append(Listing.price_per_sqm_diff_percent >= cat.lower)
            if cat.upper is not None:
                clauses.append(Listing.price_per_sqm_diff_percent < cat.upper)

    return clauses
