from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_properties"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),

        sa.Column("title", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("description_short", sa.Text(), nullable=True),
        sa.Column("description_full", sa.Text(), nullable=True),
        sa.Column("reference_code", sa.String(length=120), nullable=True),
        sa.Column("property_type", sa.String(length=80), nullable=False, server_default="Terreno"),
        sa.Column("zone", sa.String(length=200), nullable=True),

        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(length=10), nullable=False, server_default="USD"),
        sa.Column("m2", sa.Float(), nullable=False, server_default="0"),

        sa.Column("bathrooms", sa.String(length=40), nullable=True),
        sa.Column("bedrooms", sa.String(length=40), nullable=True),
        sa.Column("garages", sa.String(length=40), nullable=True),
        sa.Column("year_built", sa.String(length=40), nullable=True),
        sa.Column("built_area_m2", sa.String(length=40), nullable=True),

        sa.Column("price_per_sqm_avg_price", sa.Float(), nullable=True),
        sa.Column("price_per_sqm_diff_percent", sa.Float(), nullable=True),
        sa.Column("sale_price_avg_price", sa.Float(), nullable=True),
        sa.Column("sale_price_diff_percent", sa.Float(), nullable=True),
        sa.Column("publication_time_avg", sa.Float(), nullable=True),
        sa.Column("publication_time_diff_percent", sa.Float(), nullable=True),

        sa.Column("image_urls", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),

        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),

        sa.Column("sold", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("blacklisted", sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_index("ix_properties_type_blacklisted", "properties", ["property_type", "blacklisted"])
    op.create_index("ix_properties_zone", "properties", ["zone"])
    op.create_index("ix_properties_price_per_sqm_diff", "properties", ["price_per_sqm_diff_percent"])


def downgrade():
    op.drop_index("ix_properties_price_per_sqm_diff", table_name="properties")
    op.drop_index("ix_properties_zone", table_name="properties")
    op.drop_index("ix_properties_type_blacklisted", table_name="properties")
    op.drop_table("properties")
