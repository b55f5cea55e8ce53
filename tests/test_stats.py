import pytest

from app.services.listing_filters import ListingFilters
from app.services.listing_stats import get_filter_values, get_listing_stats
from fixtures_seed import make_listing


@pytest.mark.asyncio
async def test_stats_over_browsable_population(client, seed_listings):
    r = await client.get("/properties/stats")
    assert r.status_code == 200
    s = r.json()

    assert s["total"] == 4
    assert s["avgPrice"] == pytest.approx((100 + 1_600_000 + 50_000 + 20_000) / 4)
    # c has m2 = 0 and drops out of both area averages
    assert s["avgM2"] == pytest.approx((50 + 100 + 400) / 3)
    assert s["avgPricePerM2"] == pytest.approx((2 + 16_000 + 50) / 3)
    assert s["soldCount"] == 1
    assert s["bestDealsCount"] == 2
    assert [z["zone"] for z in s["zones"]] == ["Luque", "San Bernardino"]
    assert s["zones"][0] == {"zone": "Luque", "count": 1, "avg_price": 100.0, "avg_price_per_m2": 2.0}


@pytest.mark.asyncio
async def test_stats_on_empty_store(client):
    r = await client.get("/properties/stats")
    assert r.json() == {
        "total": 0,
        "avgPrice": 0.0,
        "avgM2": 0.0,
        "avgPricePerM2": 0.0,
        "zones": [],
        "soldCount": 0,
        "bestDealsCount": 0,
    }


@pytest.mark.asyncio
async def test_stats_scoped_by_filters(client, seed_listings):
    r = await client.get("/properties/stats", params={"zone": "Luque"})
    s = r.json()
    assert s["total"] == 2
    assert s["soldCount"] == 1
    assert s["bestDealsCount"] == 1


@pytest.mark.asyncio
async def test_top_zones_capped_and_ordered_by_count(db_session):
    rows = []
    for i in range(12):
        rows += [make_listing(zone=f"Zona {i:02d}") for _ in range(i + 1)]
    db_session.add_all(rows)
    await db_session.commit()

    res = await get_listing_stats(db_session)
    assert res.ok
    zones = res.data["zones"]
    assert len(zones) == 10
    assert zones[0] == {"zone": "Zona 11", "count": 12, "avg_price": 10000.0, "avg_price_per_m2": 100.0}
    counts = [z["count"] for z in zones]
    assert counts == sorted(counts, reverse=True)


@pytest.mark.asyncio
async def test_filter_values_have_matching_listings(client, db_session, seed_listings):
    res = await get_filter_values(db_session)
    assert res.data == {"zones": ["Luque", "San Bernardino"]}

    for zone in res.data["zones"]:
        r = await client.get("/properties", params={"zone": zone})
        assert r.json(), zone


@pytest.mark.asyncio
async def test_empty_filters_equal_global_stats(db_session, seed_listings):
    global_stats = await get_listing_stats(db_session)
    scoped = await get_listing_stats(db_session, ListingFilters())
    assert global_stats.data == scoped.data
