from datetime import datetime, timezone

import pytest_asyncio

from app.models.listing import LAND_PLOT_TYPE, Listing


def make_listing(**overrides) -> Listing:
    data = {
        "title": "Terreno",
        "address": None,
        "description_short": None,
        "property_type": LAND_PLOT_TYPE,
        "zone": None,
        "price": 10000,
        "currency": "USD",
        "m2": 100,
        "price_per_sqm_diff_percent": 0,
        "sale_price_diff_percent": 0,
        "image_urls": [],
        "sold": False,
        "blacklisted": False,
    }
    data.update(overrides)
    return Listing(**data)


def _ts(day: int) -> datetime:
    return datetime(2024, 1, day, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def seed_listings(db_session):
    """
    Four browsable land plots (a, b, c, f) plus two rows that must never show up
    in list/map/stats: a house and a blacklisted plot.
    """
    rows = {
        "a": make_listing(
            title="Terreno en Luque", address="Calle Palma 123", zone="Luque",
            price=100, currency="USD", m2=50,
            price_per_sqm_diff_percent=-25, sale_price_diff_percent=-5,
            latitude=-25.27, longitude=-57.48, created_at=_ts(1),
            image_urls=["https://img.example/a1.jpg", "https://img.example/a2.jpg"],
        ),
        "b": make_listing(
            title="Lote amplio", description_short="Ideal para quinta", zone="San Bernardino",
            price=1_600_000, currency="Gs.", m2=100,
            price_per_sqm_diff_percent=-15, sale_price_diff_percent=8,
            created_at=_ts(2),
        ),
        "c": make_listing(
            title="Fracción rural", address="Ruta 2 km 30", zone="Luque",
            price=50_000, currency="USD", m2=0,
            price_per_sqm_diff_percent=5, sale_price_diff_percent=-20,
            sold=True, latitude=0, longitude=0, created_at=_ts(3),
        ),
        "f": make_listing(
            title="Terreno céntrico", zone=None,
            price=20_000, currency="USD", m2=400,
            price_per_sqm_diff_percent=12, sale_price_diff_percent=1,
            latitude=-25.30, longitude=-57.60, created_at=_ts(4),
        ),
        "house": make_listing(
            title="Casa con terreno", zone="Asunción", property_type="Casa",
            price=90_000, price_per_sqm_diff_percent=-50, latitude=-25.28, longitude=-57.63,
        ),
        "hidden": make_listing(
            title="Terreno en Areguá", zone="Areguá", blacklisted=True,
            price_per_sqm_diff_percent=-40, latitude=-25.31, longitude=-57.38,
        ),
    }
    db_session.add_all(list(rows.values()))
    await db_session.commit()
    return {k: v.id for k, v in rows.items()}
