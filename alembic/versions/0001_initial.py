"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("role", sa.String(length=30), nullable=False, server_default="admin"),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "contact_quotes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("humanid", sa.String(length=20), nullable=True),
        sa.Column("locale", sa.String(length=5), nullable=False, server_default=""),
        sa.Column("name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=320), nullable=False, server_default=""),
        sa.Column("phone", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("preferredchannel", sa.String(length=20), nullable=False, server_default="email"),
        sa.Column("rentalstart", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rentalend", sa.DateTime(timezone=True), nullable=True),
        sa.Column("arrivalflight", sa.String(length=40), nullable=True),
        sa.Column("departureflight", sa.String(length=40), nullable=True),
        sa.Column("partysize", sa.String(length=10), nullable=True),
        sa.Column("children", sa.String(length=10), nullable=True),
        sa.Column("carid", sa.String(length=36), nullable=True),
        sa.Column("carname", sa.String(length=200), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=True, server_default="new"),
        sa.Column("booking_request_data", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_contact_quotes_humanid", "contact_quotes", ["humanid"])
    op.create_index("ix_contact_quotes_carid", "contact_quotes", ["carid"])
    op.create_index("ix_contact_quotes_status", "contact_quotes", ["status"])

    op.create_table(
        "rent_requests",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("humanid", sa.String(length=20), nullable=True),
        sa.Column("locale", sa.String(length=5), nullable=False, server_default=""),
        sa.Column("carid", sa.String(length=36), nullable=True),
        sa.Column("quoteid", sa.String(length=36), nullable=True),
        sa.Column("contactname", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("contactemail", sa.String(length=320), nullable=True),
        sa.Column("contactphone", sa.String(length=40), nullable=True),
        sa.Column("rentalstart", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rentalend", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=30), nullable=True, server_default="new"),
        sa.Column("updated", sa.Text(), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_rent_requests_humanid", "rent_requests", ["humanid"])
    op.create_index("ix_rent_requests_carid", "rent_requests", ["carid"])
    op.create_index("ix_rent_requests_quoteid", "rent_requests", ["quoteid"])
    op.create_index("ix_rent_requests_status", "rent_requests", ["status"])

    op.create_table(
        "colors",
        sa.Column("name", sa.String(length=40), primary_key=True),
    )

    op.create_table(
        "cars",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("license_plate", sa.String(length=20), nullable=False),
        sa.Column("manufacturer", sa.String(length=80), nullable=False),
        sa.Column("model", sa.String(length=80), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("body_type", sa.String(length=20), nullable=False),
        sa.Column("fuel", sa.String(length=20), nullable=False),
        sa.Column("transmission", sa.String(length=20), nullable=False),
        sa.Column("seats", sa.Integer(), nullable=False),
        sa.Column("small_luggage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("large_luggage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="available"),
        sa.Column("tires", sa.String(length=20), nullable=False),
        sa.Column("vin", sa.String(length=40), nullable=False),
        sa.Column("engine_number", sa.String(length=40), nullable=False),
        sa.Column("odometer", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("daily_prices", sa.JSON(), nullable=False),
        sa.Column("monthly_prices", sa.JSON(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("service_notes", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("known_damages", sa.Text(), nullable=True),
        sa.Column("first_registration", sa.DateTime(timezone=True), nullable=False),
        sa.Column("fleet_joined_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("inspection_valid_until", sa.DateTime(timezone=True), nullable=False),
        sa.Column("next_service_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_cars_license_plate", "cars", ["license_plate"], unique=True)
    op.create_index("ix_cars_status", "cars", ["status"])

    op.create_table(
        "car_colors",
        sa.Column("car_id", sa.String(length=36), sa.ForeignKey("cars.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("color_name", sa.String(length=40), sa.ForeignKey("colors.name", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("event_key", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=40), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("href", sa.String(length=255), nullable=False, server_default="/"),
        sa.Column("tone", sa.String(length=10), nullable=False, server_default="info"),
        sa.Column("state", sa.String(length=10), nullable=False, server_default="active"),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("notify_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "state IN ('pending', 'promoted', 'active', 'read')",
            name="ck_notifications_state",
        ),
    )
    op.create_index("ix_notifications_event_key", "notifications", ["event_key"], unique=True)
    op.create_index("ix_notifications_type", "notifications", ["type"])
    op.create_index("ix_notifications_state", "notifications", ["state"])
    op.create_index("ix_notifications_notify_at", "notifications", ["notify_at"])

    op.create_table(
        "email_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("to_email", sa.String(length=320), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("kind", sa.String(length=40), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=30), nullable=False, server_default="queued"),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("related_id", sa.String(length=36), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_email_logs_to_email", "email_logs", ["to_email"])
    op.create_index("ix_email_logs_related_id", "email_logs", ["related_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("actor_user_id", sa.String(length=36), nullable=False),
        sa.Column("action", sa.String(length=80), nullable=False),
        sa.Column("entity_type", sa.String(length=40), nullable=False),
        sa.Column("entity_id", sa.String(length=36), nullable=False),
        sa.Column("details_json", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_logs_actor_user_id", "audit_logs", ["actor_user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_entity_type", "audit_logs", ["entity_type"])
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("email_logs")
    op.drop_table("notifications")
    op.drop_table("car_colors")
    op.drop_table("cars")
    op.drop_table("colors")
    op.drop_table("rent_requests")
    op.drop_table("contact_quotes")
    op.drop_table("users")
