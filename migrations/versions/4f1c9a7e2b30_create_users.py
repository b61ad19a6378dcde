"""Create users table."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4f1c9a7e2b30"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the users table with its uniqueness constraints."""

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column(
            "is_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("verification_token", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("verification_token", name="uq_users_verification_token"),
    )


def downgrade() -> None:
    """Drop the users table."""

    op.drop_table("users")
