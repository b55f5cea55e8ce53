from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.schemas.common import ErrorResponse
from app.schemas.property import (
    BlacklistOut,
    BlacklistedProperty,
    FilterValuesOut,
    PropertyOut,
    PropertyStatsOut,
)
from app.services.listing_filters import ListingFilters
from app.services.listing_sort import DEFAULT_SORT_DIRECTION, DEFAULT_SORT_FIELD, ListingSort
from app.services.listing_stats import get_filter_values, get_listing_stats
from app.services.listings import blacklist_listing, get_listing, list_listings, list_listings_for_map
from app.services.results import QueryResult

router = APIRouter()

_STATUS_CODES = {"invalid": 400, "not_found": 404, "unavailable": 503}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _unwrap(result: QueryResult):
    if result.ok:
        return result.data
    raise HTTPException(status_code=_STATUS_CODES.get(result.status, 500), detail=result.error)


def _int_param(raw: str | None, default: int, name: str) -> int:
    # empty means "use the default", the way the browser UI sends untouched inputs
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{name} must be an integer")


def _filters(
    search: str | None = Query(default=None),
    zone: str | None = Query(default=None),
    min_price: str | None = Query(default=None),
    max_price: str | None = Query(default=None),
    min_m2: str | None = Query(default=None),
    max_m2: str | None = Query(default=None),
    sold: str | None = Query(default=None),
    deal: str | None = Query(default=None, description="excellent | good | below | fair | above"),
) -> ListingFilters:
    # numbers arrive as text so a malformed bound is ignored instead of rejected
    return ListingFilters.from_raw(
        search=search,
        zone=zone,
        min_price=min_price,
        max_price=max_price,
        min_m2=min_m2,
        max_m2=max_m2,
        sold=sold,
        deal=deal,
    )


def _map_filters(
    base: ListingFilters = Depends(_filters),
    north: str | None = Query(default=None),
    south: str | None = Query(default=None),
    east: str | None = Query(default=None),
    west: str | None = Query(default=None),
) -> ListingFilters:
    viewport = ListingFilters.from_raw(north=north, south=south, east=east, west=west)
    if viewport.bounds is None:
        return base
    return replace(base, bounds=viewport.bounds)


@router.get("/properties", response_model=list[PropertyOut], responses=_ERROR_RESPONSES)
async def list_properties(
    filters: ListingFilters = Depends(_filters),
    sort_field: str = Query(default=DEFAULT_SORT_FIELD),
    sort_direction: str = Query(default=DEFAULT_SORT_DIRECTION),
    limit: str | None = Query(default=None),
    offset: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> list[PropertyOut]:
    rows = _unwrap(
        await list_listings(
            db,
            filters,
            ListingSort.from_raw(sort_field, sort_direction),
            limit=min(_int_param(limit, settings.default_page_size, "limit"), settings.max_page_size),
            offset=_int_param(offset, 0, "offset"),
        )
    )
    return [PropertyOut.model_validate(r) for r in rows]


@router.get("/properties/map", response_model=list[PropertyOut], responses=_ERROR_RESPONSES)
async def list_map_properties(
    filters: ListingFilters = Depends(_map_filters),
    limit: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> list[PropertyOut]:
    map_limit = min(_int_param(limit, settings.default_map_limit, "limit"), settings.max_map_limit)
    rows = _unwrap(await list_listings_for_map(db, filters, limit=map_limit))
    return [PropertyOut.model_validate(r) for r in rows]


@router.get("/properties/filters", response_model=FilterValuesOut, responses=_ERROR_RESPONSES)
async def property_filter_values(db: AsyncSession = Depends(get_db)) -> FilterValuesOut:
    return FilterValuesOut(**_unwrap(await get_filter_values(db)))


@router.get("/properties/stats", response_model=PropertyStatsOut, responses=_ERROR_RESPONSES)
async def property_stats(
    filters: ListingFilters = Depends(_filters),
    db: AsyncSession = Depends(get_db),
) -> PropertyStatsOut:
    # no filter params -> global market stats
    scope = None if filters.is_empty() else filters
    return PropertyStatsOut(**_unwrap(await get_listing_stats(db, scope)))


@router.get("/properties/{property_id}", response_model=PropertyOut, responses=_ERROR_RESPONSES)
async def get_property(property_id: str, db: AsyncSession = Depends(get_db)) -> PropertyOut:
    return PropertyOut.model_validate(_unwrap(await get_listing(db, property_id)))


@router.put("/properties/{property_id}/blacklist", response_model=BlacklistOut, responses=_ERROR_RESPONSES)
async def blacklist_property(property_id: str, db: AsyncSession = Depends(get_db)) -> BlacklistOut:
    updated = _unwrap(await blacklist_listing(db, property_id))
    return BlacklistOut(
        success=True,
        message="Property successfully removed from listings",
        property=BlacklistedProperty(**updated),
    )
