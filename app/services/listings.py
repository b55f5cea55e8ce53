from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from app.models.listing import Listing
from app.services.listing_filters import ListingFilters, build_listing_predicate, mappable_clause
from app.services.listing_sort import ListingSort, select_ordering
from app.services.results import QueryResult, invalid, not_found, ok, unavailable

log = logging.getLogger(__name__)

DEFAULT_LIMIT = 24
DEFAULT_MAP_LIMIT = 200

# properties.id is a 32-bit INTEGER column
MIN_ID = -(2**31)
MAX_ID = 2**31 - 1

# connectivity problems surface as OSError before SQLAlchemy wraps them
STORE_ERRORS = (SQLAlchemyError, OSError)


def parse_listing_id(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def _check_window(limit: int, offset: int = 0) -> str | None:
    if limit < 0:
        return "limit must be non-negative"
    if offset < 0:
        return "offset must be non-negative"
    return None


async def list_listings(
    db: AsyncSession,
    filters: ListingFilters | None = None,
    sort: ListingSort | None = None,
    *,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
) -> QueryResult[list[Listing]]:
    """One page of browsable listings, ordered per `sort` (best deals first by default)."""
    problem = _check_window(limit, offset)
    if problem:
        return invalid(problem)

    stmt = (
        select(Listing)
        .where(*build_listing_predicate(filters))
        .order_by(*select_ordering(sort))
        .limit(limit)
        .offset(offset)
        .execution_options(populate_existing=True)
    )
    try:
        rows = (await db.execute(stmt)).scalars().all()
    except STORE_ERRORS:
        log.exception("list_listings: store query failed")
        return unavailable("Listing store unavailable")
    return ok(list(rows))


async def list_listings_for_map(
    db: AsyncSession,
    filters: ListingFilters | None = None,
    *,
    limit: int = DEFAULT_MAP_LIMIT,
) -> QueryResult[list[Listing]]:
    problem = _check_window(limit)
    if problem:
        return invalid(problem)

    stmt = (
        select(Listing)
        .where(*build_listing_predicate(filters), mappable_clause())
        .order_by(*select_ordering(None))
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    try:
        rows = (await db.execute(stmt)).scalars().all()
    except STORE_ERRORS:
        log.exception("list_listings_for_map: store query failed")
        return unavailable("Listing store unavailable")
    return ok(list(rows))


async def get_listing(db: AsyncSession, raw_id: object) -> QueryResult[Listing]:
    # direct lookup ignores the blacklist and property-type restriction
    listing_id = parse_listing_id(raw_id)
    if listing_id is None:
        return invalid("Invalid property ID")
    if not MIN_ID <= listing_id <= MAX_ID:
        return not_found()

    stmt = select(Listing).where(Listing.id == listing_id).execution_options(populate_existing=True)
    try:
        row = (await db.execute(stmt)).scalar_one_or_none()
    except STORE_ERRORS:
        log.exception("get_listing: store query failed id=%s", listing_id)
        return unavailable("Listing store unavailable")

    if row is None:
        return not_found()
    return ok(row)


async def blacklist_listing(db: AsyncSession, raw_id: object) -> QueryResult[dict]:
    """
    Mark a listing as no longer relevant. Single UPDATE ... RETURNING, so it is
    atomic and idempotent; returns {"id", "blacklisted"}.
    """
    listing_id = parse_listing_id(raw_id)
    if listing_id is None:
        return invalid("Invalid property ID")
    if not MIN_ID <= listing_id <= MAX_ID:
        return not_found()

    stmt = (
        update(Listing)
        .where(Listing.id == listing_id)
        .values(blacklisted=True, updated_at=func.now())
        .returning(Listing.id, Listing.blacklisted)
        .execution_options(synchronize_session=False)
    )
    try:
        row = (await db.execute(stmt)).one_or_none()
        if row is None:
            await db.rollback()
            return not_found()
        await db.commit()
    except STORE_ERRORS:
        await db.rollback()
        log.exception("blacklist_listing: update failed id=%s", listing_id)
        return unavailable("Failed to remove property")

    log.info("blacklisted listing id=%s", row.id)
    return ok({"id": row.id, "blacklisted": bool(row.blacklisted)})
