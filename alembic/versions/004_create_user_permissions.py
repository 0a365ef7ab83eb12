"""004: create user_permissions association table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE user_permissions (
            user_id         INTEGER     NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            permission_id   INTEGER     NOT NULL REFERENCES permissions (id) ON DELETE CASCADE,
            created_at      TIMESTAMP   NOT NULL DEFAULT NOW(),
            PRIMARY KEY (user_id, permission_id)
        );
    """)
    op.execute("CREATE INDEX idx_user_permissions_permission ON user_permissions (permission_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_permissions;")
