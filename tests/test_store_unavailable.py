import httpx
import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from app.core.db import get_db
from app.main import app
from app.services.listings import blacklist_listing, get_listing, list_listings, list_listings_for_map
from app.services.listing_stats import get_filter_values, get_listing_stats


class BrokenSession:
    """Stands in for an AsyncSession whose database went away."""

    def __init__(self):
        self.rolled_back = False

    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    async def commit(self):
        raise AssertionError("commit must not be reached")

    async def rollback(self):
        self.rolled_back = True


@pytest_asyncio.fixture
async def broken_client():
    async def _override_get_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = _override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_services_report_unavailable_not_empty():
    db = BrokenSession()
    for res in (
        await list_listings(db),
        await list_listings_for_map(db),
        await get_listing(db, "1"),
        await get_listing_stats(db),
        await get_filter_values(db),
    ):
        assert res.status == "unavailable"
        assert res.data is None


@pytest.mark.asyncio
async def test_blacklist_rolls_back_on_store_failure():
    db = BrokenSession()
    res = await blacklist_listing(db, 5)
    assert res.status == "unavailable"
    assert db.rolled_back


@pytest.mark.asyncio
async def test_validation_wins_over_store_failure():
    res = await get_listing(BrokenSession(), "abc")
    assert res.status == "invalid"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/properties"),
        ("GET", "/properties/map"),
        ("GET", "/properties/filters"),
        ("GET", "/properties/stats"),
        ("GET", "/properties/1"),
        ("PUT", "/properties/1/blacklist"),
    ],
)
async def test_endpoints_return_503(broken_client, method, path):
    r = await broken_client.request(method, path)
    assert r.status_code == 503
    assert "error" in r.json()
