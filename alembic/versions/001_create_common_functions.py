"""001: create common functions

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Stamps last_modified_at on every UPDATE, including ones issued outside
    # the application (manual fixes, scripts)
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_touch_last_modified()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.last_modified_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS fn_touch_last_modified();")
