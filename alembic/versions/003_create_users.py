"""003: create users table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Column widths mirror UserDTO.*_MAX_LENGTH
    op.execute("""
        CREATE TABLE users (
            id                  SERIAL          PRIMARY KEY,
            username            VARCHAR(64)     NOT NULL,
            password_hash       VARCHAR(72)     NOT NULL,
            email               VARCHAR(256)    NOT NULL,
            created_at          TIMESTAMP       NOT NULL DEFAULT NOW(),
            last_modified_at    TIMESTAMP,
            CONSTRAINT uq_users_username UNIQUE (username)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_users_last_modified
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_touch_last_modified();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
