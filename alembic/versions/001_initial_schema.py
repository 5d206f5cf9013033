"""Initial schema: sent_emails and newsletter_subscribers

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

email_status = sa.Enum(
    "queued",
    "delivered",
    "opened",
    "clicked",
    "bounced",
    "failed",
    "spam",
    name="email_status",
)


def upgrade() -> None:
    op.create_table(
        "sent_emails",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("recipient", sa.String(320), nullable=False, server_default=""),
        sa.Column("subject", sa.String(998), nullable=False, server_default=""),
        sa.Column("html_content", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", email_status, nullable=False, server_default="queued"),
        sa.Column("sent_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_sent_emails_recipient", "sent_emails", ["recipient"])
    op.create_index("ix_sent_emails_status", "sent_emails", ["status"])
    op.create_index("ix_sent_emails_sent_at", "sent_emails", ["sent_at"])

    op.create_table(
        "newsletter_subscribers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("unsubscribed_at", sa.DateTime(), nullable=True),
    )
    op.create_index(
        "ix_newsletter_subscribers_email", "newsletter_subscribers", ["email"], unique=True
    )
    op.create_index(
        "ix_newsletter_subscribers_unsubscribed_at",
        "newsletter_subscribers",
        ["unsubscribed_at"],
    )


def downgrade() -> None:
    op.drop_table("newsletter_subscribers")
    op.drop_table("sent_emails")
    email_status.drop(op.get_bind(), checkfirst=True)
