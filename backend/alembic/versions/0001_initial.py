"""Initial schema: accounts, directory resources and incident reports.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


USER_ROLE = sa.Enum(
    "admin", "moderator", "user", "premiumuser", "rescueteam", name="user_role"
)
RESCUE_AVAILABILITY = sa.Enum(
    "24/7", "Business Hours", "Emergency Only", name="rescue_availability"
)
FOOD_CATEGORY = sa.Enum(
    "Dog Food",
    "Cat Food",
    "Bird Food",
    "Fish Food",
    "Small Animal Food",
    "Treats",
    "Supplements",
    name="food_category",
)
AGE_GROUP = sa.Enum("Puppy/Kitten", "Adult", "Senior", "All Ages", name="age_group")
EDUCATION_CATEGORY = sa.Enum(
    "Pet Care",
    "Training",
    "Health",
    "Nutrition",
    "Behavior",
    "Emergency Care",
    "General",
    name="education_category",
)
DIFFICULTY = sa.Enum("Beginner", "Intermediate", "Advanced", name="difficulty")
ANIMAL_CONDITION = sa.Enum(
    "Critical", "Injured", "Sick", "Healthy", "Unknown", name="animal_condition"
)
REPORT_STATUS = sa.Enum(
    "Pending", "In Progress", "Resolved", "Closed", name="report_status"
)
REPORT_PRIORITY = sa.Enum("Low", "Medium", "High", "Critical", name="report_priority")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _ownership() -> list[sa.Column]:
    return [
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column(
            "created_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "updated_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
    ]


def _resource_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_id", table, ["id"])
    op.create_index(f"ix_{table}_created_at", table, ["created_at"])
    op.create_index(f"ix_{table}_is_active", table, ["is_active"])
    op.create_index(f"ix_{table}_created_by_id", table, ["created_by_id"])


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("hashed_password", sa.String(128), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("lock_until", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "vet_directory",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("hospital", sa.String(100), nullable=False),
        sa.Column("address", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(254), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        sa.Column("services", sa.JSON(), nullable=False),
        sa.Column("emergency_service", sa.Boolean(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("image", sa.JSON(), nullable=True),
        *_timestamps(),
        *_ownership(),
    )
    _resource_indexes("vet_directory")

    op.create_table(
        "rescue_teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("team_name", sa.String(100), nullable=False),
        sa.Column("team_address", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(254), nullable=True),
        sa.Column("specialization", sa.JSON(), nullable=False),
        sa.Column("team_size", sa.Integer(), nullable=True),
        sa.Column("availability", RESCUE_AVAILABILITY, nullable=False),
        sa.Column("equipment", sa.JSON(), nullable=False),
        sa.Column("image", sa.JSON(), nullable=True),
        *_timestamps(),
        *_ownership(),
    )
    _resource_indexes("rescue_teams")

    op.create_table(
        "animal_food",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("food_name", sa.String(100), nullable=False),
        sa.Column("price", sa.String(50), nullable=False),
        sa.Column("price_numeric", sa.Float(), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("category", FOOD_CATEGORY, nullable=False),
        sa.Column("brand", sa.String(50), nullable=True),
        sa.Column("weight", sa.String(50), nullable=True),
        sa.Column("ingredients", sa.JSON(), nullable=False),
        sa.Column("nutritional_info", sa.JSON(), nullable=True),
        sa.Column("age_group", AGE_GROUP, nullable=False),
        sa.Column("in_stock", sa.Boolean(), nullable=True),
        sa.Column("stock_quantity", sa.Integer(), nullable=True),
        sa.Column("image", sa.JSON(), nullable=True),
        *_timestamps(),
        *_ownership(),
    )
    _resource_indexes("animal_food")
    op.create_index("ix_animal_food_price_numeric", "animal_food", ["price_numeric"])
    op.create_index("ix_animal_food_category", "animal_food", ["category"])

    op.create_table(
        "education",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("tips", sa.Text(), nullable=False),
        sa.Column("url", sa.String(500), nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("category", EDUCATION_CATEGORY, nullable=False),
        sa.Column("difficulty", DIFFICULTY, nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_published", sa.Boolean(), nullable=True),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        *_ownership(),
    )
    _resource_indexes("education")
    op.create_index("ix_education_category", "education", ["category"])
    op.create_index(
        "ix_education_published_active", "education", ["is_published", "is_active"]
    )

    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("animal_type", sa.String(50), nullable=False),
        sa.Column("animal_condition", ANIMAL_CONDITION, nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("contact_name", sa.String(100), nullable=True),
        sa.Column("contact_phone", sa.String(20), nullable=True),
        sa.Column("contact_email", sa.String(254), nullable=True),
        sa.Column("status", REPORT_STATUS, nullable=False),
        sa.Column("priority", REPORT_PRIORITY, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("reported_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "reported_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "assigned_to_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_reports_id", "reports", ["id"])
    op.create_index("ix_reports_created_at", "reports", ["created_at"])
    op.create_index("ix_reports_animal_condition", "reports", ["animal_condition"])
    op.create_index("ix_reports_status", "reports", ["status"])
    op.create_index("ix_reports_priority", "reports", ["priority"])
    op.create_index("ix_reports_is_active", "reports", ["is_active"])
    op.create_index("ix_reports_reported_at", "reports", ["reported_at"])

    op.create_table(
        "report_notes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "report_id",
            sa.Integer(),
            sa.ForeignKey("reports.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "added_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_report_notes_id", "report_notes", ["id"])
    op.create_index("ix_report_notes_report_id", "report_notes", ["report_id"])


def downgrade() -> None:
    for table in (
        "report_notes",
        "reports",
        "education",
        "animal_food",
        "rescue_teams",
        "vet_directory",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_type in (
        REPORT_PRIORITY,
        REPORT_STATUS,
        ANIMAL_CONDITION,
        DIFFICULTY,
        EDUCATION_CATEGORY,
        AGE_GROUP,
        FOOD_CATEGORY,
        RESCUE_AVAILABILITY,
        USER_ROLE,
    ):
        enum_type.drop(bind, checkfirst=True)
