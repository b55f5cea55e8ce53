from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.services.deal_category import classify_deal


class PropertyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    price: float
    currency: str
    m2: float
    link: str | None = None
    address: str | None = None
    description_short: str | None = None
    description_full: str | None = None
    reference_code: str | None = None
    property_type: str
    zone: str | None = None
    image_urls: list[str] = Field(default_factory=list)

    bathrooms: str | None = None
    bedrooms: str | None = None
    garages: str | None = None
    year_built: str | None = None
    built_area_m2: str | None = None

    price_per_sqm_avg_price: float | None = None
    price_per_sqm_diff_percent: float | None = None
    sale_price_avg_price: float | None = None
    sale_price_diff_percent: float | None = None
    publication_time_avg: float | None = None
    publication_time_diff_percent: float | None = None

    latitude: float | None = None
    longitude: float | None = None

    sold: bool
    blacklisted: bool
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def price_per_m2(self) -> float | None:
        # not applicable without an area
        if not self.m2:
            return None
        return self.price / self.m2

    @computed_field
    @property
    def deal_category(self) -> str | None:
        return classify_deal(self.price_per_sqm_diff_percent)


class BlacklistedProperty(BaseModel):
    id: int
    blacklisted: bool


class BlacklistOut(BaseModel):
    success: bool
    message: str
    property: BlacklistedProperty


class FilterValuesOut(BaseModel):
    zones: list[str]


class ZoneStatsOut(BaseModel):
    zone: str
    count: int
    avg_price: float
    avg_price_per_m2: float


class PropertyStatsOut(BaseModel):
    total: int
    avgPrice: float
    avgM2: float
    avgPricePerM2: float
    zones: list[ZoneStatsOut]
    soldCount: int
    bestDealsCount: int
