"""005: seed the default permission catalog

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO permissions (permission_key, name, description) VALUES
            ('LOGIN_ALLOWED',  'Login allowed',  'May sign in to the application.'),
            ('MANAGE_USERS',   'Manage users',   'May create, edit and delete users.'),
            ('MANAGE_GROUPS',  'Manage groups',  'May create, edit and delete user groups.'),
            ('VIEW_USERS',     'View users',     'May list and inspect users.');
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM permissions
        WHERE permission_key IN ('LOGIN_ALLOWED', 'MANAGE_USERS', 'MANAGE_GROUPS', 'VIEW_USERS');
    """)
