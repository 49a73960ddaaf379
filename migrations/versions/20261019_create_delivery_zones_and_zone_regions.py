"""Create delivery.delivery_zones / delivery.zone_regions and migrate legacy pincode_zones

Revision ID: 20261019_create_delivery_zones_and_zone_regions
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_create_delivery_zones_and_zone_regions"
down_revision = None
branch_labels = None
depends_on = None


REGION_TYPE = sa.Enum("state", "district", "pincode", name="region_type_enum")


def _table_exists(conn, schema: str, table_name: str) -> bool:
    return (
        conn.execute(
            sa.text(
                """
                SELECT 1
                FROM information_schema.tables
                WHERE table_schema = :schema
                  AND table_name = :table
                """
            ),
            {"schema": schema, "table": table_name},
        ).scalar()
        is not None
    )


def _clean(expr: str) -> str:
    """SQL counterpart of region_keys.clean_name: trim and collapse inner whitespace."""
    return f"regexp_replace(trim({expr}), '\\s+', ' ', 'g')"


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS delivery")

    op.create_table(
        "delivery_zones",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("zone_number", sa.Integer, nullable=False),
        sa.Column("zone_name", sa.String(120), nullable=False),
        sa.Column("delivery_days_min", sa.Integer, nullable=False),
        sa.Column("delivery_days_max", sa.Integer, nullable=False),
        sa.Column("delivery_charge", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("zone_number > 0", name="ck_delivery_zones_zone_number_positive"),
        sa.CheckConstraint("delivery_days_min <= delivery_days_max", name="ck_delivery_zones_days_range"),
        sa.CheckConstraint("delivery_charge >= 0", name="ck_delivery_zones_charge_non_negative"),
        schema="delivery",
    )
    op.create_index(
        "ix_delivery_delivery_zones_zone_number", "delivery_zones", ["zone_number"],
        unique=True, schema="delivery",
    )

    op.create_table(
        "zone_regions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "delivery_zone_id", sa.Integer,
            sa.ForeignKey("delivery.delivery_zones.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("region_type", REGION_TYPE, nullable=False),
        sa.Column("state_name", sa.String(100), nullable=True),
        sa.Column("district_name", sa.String(100), nullable=True),
        sa.Column("pincode", sa.String(6), nullable=True),
        sa.Column("office_name", sa.String(150), nullable=True),
        sa.Column("region_key", sa.String(220), nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.text("now()"), nullable=False),
        schema="delivery",
    )
    op.create_index("ix_delivery_zone_regions_delivery_zone_id", "zone_regions", ["delivery_zone_id"], schema="delivery")
    op.create_index("ix_delivery_zone_regions_pincode", "zone_regions", ["pincode"], schema="delivery")
    op.create_index("ix_delivery_zone_regions_region_key", "zone_regions", ["region_key"], unique=True, schema="delivery")

    conn = op.get_bind()

    # Legacy tables lived in "public". Copy them once; rows sharing a natural key
    # keep the first occurrence, which is what the old lookups returned.
    if _table_exists(conn, "public", "delivery_zones"):
        op.execute(
            """
            INSERT INTO delivery.delivery_zones
                (zone_number, zone_name, delivery_days_min, delivery_days_max,
                 delivery_charge, description, is_active, created_at, updated_at)
            SELECT zone_number, zone_name, delivery_days_min, delivery_days_max,
                   delivery_charge, description, is_active, created_at, updated_at
            FROM public.delivery_zones
            ON CONFLICT (zone_number) DO NOTHING
            """
        )

        if _table_exists(conn, "public", "zone_regions"):
            # "State - District" rows are split into separate fields
            state = _clean("split_part(zr.state_name, ' - ', 1)")
            legacy_district = _clean("split_part(zr.state_name, ' - ', 2)")
            district = f"coalesce(nullif({_clean('zr.district_name')}, ''), nullif({legacy_district}, ''))"
            op.execute(
                f"""
                INSERT INTO delivery.zone_regions
                    (delivery_zone_id, region_type, state_name, district_name, pincode,
                     office_name, region_key, created_at, updated_at)
                SELECT dz.id,
                       CASE
                           WHEN zr.pincode ~ '^[0-9]{{6}}$' THEN 'pincode'
                           WHEN zr.region_type = 'district' THEN 'district'
                           ELSE 'state'
                       END::region_type_enum,
                       CASE WHEN zr.region_type = 'district' THEN {state} ELSE {_clean('zr.state_name')} END,
                       CASE WHEN zr.region_type = 'district' THEN {district} ELSE {_clean('zr.district_name')} END,
                       CASE WHEN zr.pincode ~ '^[0-9]{{6}}$' THEN zr.pincode END,
                       zr.office_name,
                       CASE
                           WHEN zr.pincode ~ '^[0-9]{{6}}$' THEN 'pincode:' || zr.pincode
                           WHEN zr.region_type = 'district' THEN
                               'district:' || lower({state}) || '|' || lower({district})
                           ELSE 'state:' || lower({_clean('zr.state_name')})
                       END,
                       zr.created_at, zr.updated_at
                FROM public.zone_regions zr
                JOIN public.delivery_zones old_dz ON old_dz.id = zr.delivery_zone_id
                JOIN delivery.delivery_zones dz ON dz.zone_number = old_dz.zone_number
                WHERE zr.pincode ~ '^[0-9]{{6}}$'
                   OR (zr.region_type = 'district' AND {district} IS NOT NULL)
                   OR (zr.region_type IS DISTINCT FROM 'district' AND {_clean('zr.state_name')} <> '')
                ORDER BY zr.created_at, zr.id
                ON CONFLICT (region_key) DO NOTHING
                """
            )

        if _table_exists(conn, "public", "pincode_zones"):
            op.execute(
                f"""
                INSERT INTO delivery.zone_regions
                    (delivery_zone_id, region_type, state_name, district_name, pincode,
                     region_key, created_at, updated_at)
                SELECT dz.id, 'pincode'::region_type_enum, {_clean('pz.state')}, {_clean('pz.city')}, pz.pincode,
                       'pincode:' || pz.pincode, pz.created_at, pz.created_at
                FROM public.pincode_zones pz
                JOIN public.delivery_zones old_dz ON old_dz.id = pz.delivery_zone_id
                JOIN delivery.delivery_zones dz ON dz.zone_number = old_dz.zone_number
                WHERE pz.pincode ~ '^[0-9]{{6}}$'
                ORDER BY pz.created_at, pz.id
                ON CONFLICT (region_key) DO NOTHING
                """
            )


def downgrade() -> None:
    op.drop_index("ix_delivery_zone_regions_region_key", table_name="zone_regions", schema="delivery")
    op.drop_index("ix_delivery_zone_regions_pincode", table_name="zone_regions", schema="delivery")
    op.drop_index("ix_delivery_zone_regions_delivery_zone_id", table_name="zone_regions", schema="delivery")
    op.drop_table("zone_regions", schema="delivery")
    REGION_TYPE.drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_delivery_delivery_zones_zone_number", table_name="delivery_zones", schema="delivery")
    op.drop_table("delivery_zones", schema="delivery")
