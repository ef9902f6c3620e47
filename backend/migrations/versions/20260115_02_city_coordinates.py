"""Optional latitude/longitude on cities."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20260115_02"
down_revision = "20260101_01"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table(
        "cities", table_kwargs={"sqlite_autoincrement": True}
    ) as batch_op:
        batch_op.add_column(sa.Column("latitude", sa.Float(), nullable=True))
        batch_op.add_column(sa.Column("longitude", sa.Float(), nullable=True))
    op.create_index(
        "ix_cities_coordinates",
        "cities",
        ["latitude", "longitude"],
    )


def downgrade() -> None:
    op.drop_index("ix_cities_coordinates", table_name="cities")
    with op.batch_alter_table(
        "cities", table_kwargs={"sqlite_autoincrement": True}
    ) as batch_op:
        batch_op.drop_column("longitude")
        batch_op.drop_column("latitude")
