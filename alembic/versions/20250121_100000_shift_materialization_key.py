"""Unique materialization key for scheduled shifts

Revision ID: 20250121_100000
Revises: 20250106_090000
Create Date: 2025-01-21 10:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20250121_100000"
down_revision: Union[str, None] = "20250106_090000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    # Keep the oldest row of any duplicate (date, template, role) before adding the key.
    conn.execute(
        sa.text(
            """
            DELETE FROM scheduled_shifts
            WHERE shift_template_id IS NOT NULL
              AND id NOT IN (
                SELECT MIN(id) FROM scheduled_shifts
                WHERE shift_template_id IS NOT NULL
                GROUP BY shift_date, shift_template_id, role_id
              )
            """
        )
    )
    with op.batch_alter_table("scheduled_shifts") as batch_op:
        batch_op.create_unique_constraint(
            "uq_scheduled_shift_materialization",
            ["shift_date", "shift_template_id", "role_id"],
        )


def downgrade() -> None:
    with op.batch_alter_table("scheduled_shifts") as batch_op:
        batch_op.drop_constraint("uq_scheduled_shift_materialization", type_="unique")
