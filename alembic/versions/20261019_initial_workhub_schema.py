"""initial_workhub_schema

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates the five tables of the Workspace > Project > Task hierarchy:
1. Users
2. Workspaces (one active invite code each)
3. Members (unique per workspace/user, role ADMIN or MEMBER)
4. Projects
5. Tasks (ordered by position within workspace/status columns)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    # ==========================================================================
    # 1. Users
    # ==========================================================================
    op.create_table('Users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_Users_email'), 'Users', ['email'], unique=True)

    # ==========================================================================
    # 2. Workspaces
    # ==========================================================================
    op.create_table('Workspaces',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('image_url', sa.String(length=2048), nullable=True),
        sa.Column('invite_code', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['Users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_Workspaces_user_id'), 'Workspaces', ['user_id'], unique=False)
    op.create_index(op.f('ix_Workspaces_created_at'), 'Workspaces', ['created_at'], unique=False)

    # ==========================================================================
    # 3. Members
    # ==========================================================================
    op.create_table('Members',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['Workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['Users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('workspace_id', 'user_id', name='uq_members_workspace_user')
    )
    op.create_index(op.f('ix_Members_workspace_id'), 'Members', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_Members_user_id'), 'Members', ['user_id'], unique=False)

    # ==========================================================================
    # 4. Projects
    # ==========================================================================
    op.create_table('Projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('image_url', sa.String(length=2048), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['Workspaces.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_Projects_workspace_id'), 'Projects', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_Projects_created_at'), 'Projects', ['created_at'], unique=False)

    # ==========================================================================
    # 5. Tasks
    # ==========================================================================
    op.create_table('Tasks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('assignee_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=True),
        sa.Column('position', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['Workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['project_id'], ['Projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assignee_id'], ['Members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_Tasks_workspace_id'), 'Tasks', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_Tasks_project_id'), 'Tasks', ['project_id'], unique=False)
    op.create_index(op.f('ix_Tasks_assignee_id'), 'Tasks', ['assignee_id'], unique=False)
    op.create_index(op.f('ix_Tasks_created_at'), 'Tasks', ['created_at'], unique=False)
    op.create_index(
        'ix_Tasks_workspace_status_position',
        'Tasks',
        ['workspace_id', 'status', 'position'],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index('ix_Tasks_workspace_status_position', table_name='Tasks')
    op.drop_index(op.f('ix_Tasks_created_at'), table_name='Tasks')
    op.drop_index(op.f('ix_Tasks_assignee_id'), table_name='Tasks')
    op.drop_index(op.f('ix_Tasks_project_id'), table_name='Tasks')
    op.drop_index(op.f('ix_Tasks_workspace_id'), table_name='Tasks')
    op.drop_table('Tasks')

    op.drop_index(op.f('ix_Projects_created_at'), table_name='Projects')
    op.drop_index(op.f('ix_Projects_workspace_id'), table_name='Projects')
    op.drop_table('Projects')

    op.drop_index(op.f('ix_Members_user_id'), table_name='Members')
    op.drop_index(op.f('ix_Members_workspace_id'), table_name='Members')
    op.drop_table('Members')

    op.drop_index(op.f('ix_Workspaces_created_at'), table_name='Workspaces')
    op.drop_index(op.f('ix_Workspaces_user_id'), table_name='Workspaces')
    op.drop_table('Workspaces')

    op.drop_index(op.f('ix_Users_email'), table_name='Users')
    op.drop_table('Users')
