"""002: create permissions table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE permissions (
            id                  SERIAL          PRIMARY KEY,
            permission_key      VARCHAR(64)     NOT NULL,
            name                VARCHAR(128)    NOT NULL,
            description         TEXT,
            created_at          TIMESTAMP       NOT NULL DEFAULT NOW(),
            last_modified_at    TIMESTAMP,
            CONSTRAINT uq_permissions_key UNIQUE (permission_key)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_permissions_last_modified
            BEFORE UPDATE ON permissions
            FOR EACH ROW EXECUTE FUNCTION fn_touch_last_modified();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS permissions CASCADE;")
