"""init
Revision ID: 0001_init
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _uuid(name, **kwargs):
    return sa.Column(name, postgresql.UUID(as_uuid=True), **kwargs)


def _fk(name, target, nullable=False):
    return sa.Column(name, postgresql.UUID(as_uuid=True), sa.ForeignKey(target), nullable=nullable)


def _stamps(soft_delete=True):
    # Naive wall-clock timestamps; see app/db/wall_clock.py.
    columns = [
        _uuid("id", primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]
    if soft_delete:
        columns.append(sa.Column("deleted_at", sa.DateTime(), nullable=True))
    return columns


def upgrade():
    op.create_table(
        "plants",
        *_stamps(),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("subplant", sa.String(length=200), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_table(
        "lines",
        *_stamps(),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        _fk("plant_id", "plants.id"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_table(
        "machine_types",
        *_stamps(soft_delete=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_table(
        "parameters",
        *_stamps(soft_delete=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.Column("opc_tag_name", sa.String(length=200), nullable=False),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_table(
        "machine_type_parameters",
        *_stamps(),
        _fk("machine_type_id", "machine_types.id"),
        _fk("parameter_id", "parameters.id"),
    )
    op.create_table(
        "machines",
        *_stamps(),
        sa.Column("name", sa.String(length=200), nullable=False),
        _fk("line_id", "lines.id"),
        _fk("machine_type_id", "machine_types.id"),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_table(
        "parts",
        *_stamps(),
        sa.Column("sku", sa.String(length=100), nullable=True),
        sa.Column("part_no", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        _fk("line_id", "lines.id"),
        sa.Column("qty_per_lot", sa.Integer(), nullable=True),
        sa.Column("cycle_time_sec", sa.Float(), nullable=True),
    )
    op.create_table(
        "child_parts",
        *_stamps(),
        sa.Column("child_part_no", sa.String(length=100), nullable=False),
        sa.Column("child_part_name", sa.String(length=200), nullable=False),
        _fk("part_id", "parts.id"),
        sa.Column("qty_lot_supply", sa.Integer(), nullable=True),
    )
    op.create_table(
        "shifts",
        *_stamps(),
        _fk("line_id", "lines.id"),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("work_start", sa.Time(), nullable=False),
        sa.Column("work_end", sa.Time(), nullable=False),
        sa.Column("break1_start", sa.Time(), nullable=True),
        sa.Column("break1_end", sa.Time(), nullable=True),
        sa.Column("break2_start", sa.Time(), nullable=True),
        sa.Column("break2_end", sa.Time(), nullable=True),
        sa.Column("break3_start", sa.Time(), nullable=True),
        sa.Column("break3_end", sa.Time(), nullable=True),
        sa.Column("loading_time_in_sec", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_table(
        "pdt_categories",
        *_stamps(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("default_duration_min", sa.Integer(), nullable=False),
    )
    op.create_table(
        "updt_categories",
        *_stamps(),
        sa.Column("department", sa.String(length=100), nullable=False),
        _fk("line_id", "lines.id"),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    op.create_table(
        "reject_criteria",
        *_stamps(),
        _fk("line_id", "lines.id"),
        sa.Column("category", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    op.create_table(
        "users",
        *_stamps(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("npk", sa.String(length=50), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="USER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "user_per_lines",
        *_stamps(),
        _fk("user_id", "users.id"),
        sa.Column("user_uid", sa.String(length=100), nullable=False),
        _fk("line_id", "lines.id"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
    )
    op.create_table(
        "production_plans",
        *_stamps(soft_delete=False),
        sa.Column("work_order_no", sa.String(length=50), nullable=False),
        sa.Column("plan_date", sa.DateTime(), nullable=False),
        _fk("line_id", "lines.id"),
        _fk("shift_id", "shifts.id"),
        _fk("part_id", "parts.id"),
        sa.Column("cycle_time_sec", sa.Float(), nullable=False),
        sa.Column("planned_qty", sa.Integer(), nullable=False),
        sa.Column("actual_qty", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("ng_qty", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="OPEN"),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        _fk("created_by_id", "users.id", nullable=True),
    )
    op.create_table(
        "oee_records",
        *_stamps(soft_delete=False),
        _fk("plan_id", "production_plans.id"),
        sa.Column("availability", sa.Float(), nullable=False),
        sa.Column("performance", sa.Float(), nullable=False),
        sa.Column("quality", sa.Float(), nullable=False),
        sa.Column("oee", sa.Float(), nullable=False),
        sa.UniqueConstraint("plan_id", name="uq_oee_records_plan_id"),
    )
    op.create_table(
        "rejection_events",
        *_stamps(soft_delete=False),
        _fk("plan_id", "production_plans.id"),
        _fk("reject_criteria_id", "reject_criteria.id"),
        sa.Column("qty", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("occurred_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "downtime_events",
        *_stamps(soft_delete=False),
        _fk("plan_id", "production_plans.id"),
        sa.Column("kind", sa.String(length=10), nullable=False),
        _fk("pdt_category_id", "pdt_categories.id", nullable=True),
        _fk("updt_category_id", "updt_categories.id", nullable=True),
        _fk("machine_id", "machines.id", nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("duration_sec", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("over_pdt_duration_sec", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_table(
        "notifications",
        *_stamps(soft_delete=False),
        _fk("user_id", "users.id", nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False, server_default="INFO"),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("read_at", sa.DateTime(), nullable=True),
    )

    for table, column in (
        ("plants", "deleted_at"),
        ("lines", "plant_id"),
        ("lines", "deleted_at"),
        ("machine_types", "status"),
        ("parameters", "status"),
        ("machine_type_parameters", "machine_type_id"),
        ("machine_type_parameters", "parameter_id"),
        ("machines", "line_id"),
        ("machines", "machine_type_id"),
        ("parts", "part_no"),
        ("parts", "line_id"),
        ("child_parts", "child_part_no"),
        ("child_parts", "part_id"),
        ("shifts", "line_id"),
        ("updt_categories", "line_id"),
        ("reject_criteria", "line_id"),
        ("users", "deleted_at"),
        ("user_per_lines", "user_id"),
        ("user_per_lines", "user_uid"),
        ("user_per_lines", "line_id"),
        ("production_plans", "work_order_no"),
        ("production_plans", "plan_date"),
        ("production_plans", "line_id"),
        ("production_plans", "shift_id"),
        ("production_plans", "part_id"),
        ("production_plans", "status"),
        ("rejection_events", "plan_id"),
        ("rejection_events", "reject_criteria_id"),
        ("rejection_events", "occurred_at"),
        ("downtime_events", "plan_id"),
        ("notifications", "user_id"),
        ("notifications", "category"),
        ("notifications", "is_read"),
    ):
        op.create_index(f"ix_{table}_{column}", table, [column])


def downgrade():
    for table in (
        "notifications",
        "downtime_events",
        "rejection_events",
        "oee_records",
        "production_plans",
        "user_per_lines",
        "users",
        "reject_criteria",
        "updt_categories",
        "pdt_categories",
        "shifts",
        "child_parts",
        "parts",
        "machines",
        "machine_type_parameters",
        "parameters",
        "machine_types",
        "lines",
        "plants",
    ):
        op.drop_table(table)
