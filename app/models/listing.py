from sqlalchemy import JSON, Boolean, Float, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin


# Only land plots are browsable; other property types stay in the table untouched.
LAND_PLOT_TYPE = "Terreno"


class Listing(TimestampMixin, Base):
    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_properties_type_blacklisted", "property_type", "blacklisted"),
        Index("ix_properties_zone", "zone"),
        Index("ix_properties_price_per_sqm_diff", "price_per_sqm_diff_percent"),
    )
    __mapper_args__ = {"eager_defaults": True}

    # assigned by the store; rows are inserted by the external ingestion job
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    link: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description_short: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_full: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference_code: Mapped[str | None] = mapped_column(String(120), nullable=True)
    property_type: Mapped[str] = mapped_column(String(80), nullable=False, default=LAND_PLOT_TYPE)
    zone: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # "Gs." (guaraní) or a foreign code such as "USD"
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    m2: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    bathrooms: Mapped[str | None] = mapped_column(String(40), nullable=True)
    bedrooms: Mapped[str | None] = mapped_column(String(40), nullable=True)
    garages: Mapped[str | None] = mapped_column(String(40), nullable=True)
    year_built: Mapped[str | None] = mapped_column(String(40), nullable=True)
    built_area_m2: Mapped[str | None] = mapped_column(String(40), nullable=True)

    # Market comparison, computed upstream. Negative diff = below market.
    price_per_sqm_avg_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    price_per_sqm_diff_percent: Mapped[float | None] = mapped_column(Float, nullable=True)
    sale_price_avg_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    sale_price_diff_percent: Mapped[float | None] = mapped_column(Float, nullable=True)
    publication_time_avg: Mapped[float | None] = mapped_column(Float, nullable=True)
    publication_time_diff_percent: Mapped[float | None] = mapped_column(Float, nullable=True)

    image_urls: Mapped[list] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list
    )

    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    sold: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    blacklisted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
