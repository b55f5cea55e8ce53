from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.listing import Listing
from app.services.listing_filters import ListingFilters, build_listing_predicate
from app.services.listings import STORE_ERRORS
from app.services.results import QueryResult, ok, unavailable

log = logging.getLogger(__name__)

TOP_ZONES = 10
# price_per_sqm_diff_percent below this counts as a best deal
BEST_DEAL_THRESHOLD = -10


def _float(v: Any) -> float:
    return float(v) if v is not None else 0.0


async def get_listing_stats(db: AsyncSession, filters: ListingFilters | None = None) -> QueryResult[dict[str, Any]]:
    """
    Summary statistics over browsable land plots.

    Global when `filters` is None or empty, otherwise scoped by the same
    predicate the list endpoint uses.
    """
    where = build_listing_predicate(filters)
    priced = (Listing.price > 0, Listing.m2 > 0)

    totals = select(
        func.count(Listing.id),
        func.count(Listing.id).filter(Listing.sold.is_(True)),
        func.count(Listing.id).filter(Listing.price_per_sqm_diff_percent < BEST_DEAL_THRESHOLD),
    ).where(*where)
    avg_price = select(func.avg(Listing.price)).where(*where, Listing.price > 0)
    avg_m2 = select(func.avg(Listing.m2)).where(*where, Listing.m2 > 0)
    avg_ppm2 = select(func.avg(Listing.price / Listing.m2)).where(*where, *priced)

    zone_count = func.count(Listing.id).label("count")
    zones = (
        select(
            Listing.zone,
            zone_count,
            func.avg(Listing.price).label("avg_price"),
            func.avg(Listing.price / Listing.m2).label("avg_price_per_m2"),
        )
        .where(*where, Listing.zone.is_not(None), *priced)
        .group_by(Listing.zone)
        .order_by(desc(zone_count), Listing.zone.asc())
        .limit(TOP_ZONES)
    )

    try:
        total, sold_count, best_deals = (await db.execute(totals)).one()
        avg_price_v = (await db.execute(avg_price)).scalar_one()
        avg_m2_v = (await db.execute(avg_m2)).scalar_one()
        avg_ppm2_v = (await db.execute(avg_ppm2)).scalar_one()
        zone_rows = (await db.execute(zones)).all()
    except STORE_ERRORS:
        log.exception("get_listing_stats: store query failed")
        return unavailable("Listing store unavailable")

    return ok({
        "total": int(total or 0),
        "avgPrice": _float(avg_price_v),
        "avgM2": _float(avg_m2_v),
        "avgPricePerM2": _float(avg_ppm2_v),
        "zones": [
            {
                "zone": r.zone,
                "count": int(r.count),
                "avg_price": _float(r.avg_price),
                "avg_price_per_m2": _float(r.avg_price_per_m2),
            }
            for r in zone_rows
        ],
        "soldCount": int(sold_count or 0),
        "bestDealsCount": int(best_deals or 0),
    })


async def get_filter_values(db: AsyncSession) -> QueryResult[dict[str, list[str]]]:
    stmt = (
        select(Listing.zone)
        .where(*build_listing_predicate(None), Listing.zone.is_not(None), Listing.zone != "")
        .distinct()
        .order_by(Listing.zone.asc())
    )
    try:
        zones = (await db.execute(stmt)).scalars().all()
    except STORE_ERRORS:
        log.exception("get_filter_values: store query failed")
        return unavailable("Listing store unavailable")
    return ok({"zones": list(zones)})
