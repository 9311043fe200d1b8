"""Initial HealthVault schema

Revision ID: 4f1c2a9b7d3e
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4f1c2a9b7d3e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _owner():
    return sa.Column(
        "user_id",
        sa.String(36),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(), nullable=True),
        sa.Column("profile_image", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "otp_codes",
        sa.Column("id", sa.String(36), primary_key=True),
        _owner(),
        sa.Column("code", sa.String(6), nullable=False),
        sa.Column("purpose", sa.String(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("is_used", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_otp_lookup", "otp_codes", ["user_id", "purpose", "code"])
    op.create_index("idx_otp_expires_at", "otp_codes", ["expires_at"])

    op.create_table(
        "health_ids",
        sa.Column("id", sa.String(36), primary_key=True),
        _owner(),
        sa.Column("health_code", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("ix_health_ids_health_code", "health_ids", ["health_code"], unique=True)

    op.create_table(
        "emergency_info",
        sa.Column("id", sa.String(36), primary_key=True),
        _owner(),
        sa.Column("blood_group", sa.String(3), nullable=True),
        sa.Column("allergies", sa.JSON(), nullable=False),
        sa.Column("chronic_diseases", sa.JSON(), nullable=False),
        sa.Column("medications", sa.JSON(), nullable=False),
        sa.Column("emergency_contacts", sa.JSON(), nullable=False),
        sa.Column("organ_donor", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "medical_records",
        sa.Column("id", sa.String(36), primary_key=True),
        _owner(),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("file_url", sa.String(), nullable=False),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_record_user_id", "medical_records", ["user_id"])
    op.create_index("idx_record_type", "medical_records", ["type"])

    op.create_table(
        "reminders",
        sa.Column("id", sa.String(36), primary_key=True),
        _owner(),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("recurring", sa.Boolean(), nullable=False),
        sa.Column("frequency", sa.String(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_reminder_user_id", "reminders", ["user_id"])
    op.create_index("idx_reminder_scheduled_at", "reminders", ["scheduled_at"])


def downgrade() -> None:
    op.drop_table("reminders")
    op.drop_table("medical_records")
    op.drop_table("emergency_info")
    op.drop_table("health_ids")
    op.drop_table("otp_codes")
    op.drop_table("users")
