"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _reference_table(name: str, length: int) -> None:
    op.create_table(name,
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=length), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index(f'ix_{name}_id', name, ['id'], unique=False)


def upgrade() -> None:
    _reference_table('roles', 50)
    _reference_table('categories', 100)
    _reference_table('priorities', 50)
    _reference_table('statuses', 50)

    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'], unique=False)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint('points >= 0', name='check_points_non_negative'),
        sa.ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_profiles_username', 'profiles', ['username'], unique=True)

    op.create_table('points_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('profile_id', sa.Integer(), nullable=False),
        sa.Column('delta', sa.Integer(), nullable=False),
        sa.Column('balance_after', sa.Integer(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('timestamp', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_points_entries_id', 'points_entries', ['id'], unique=False)
    op.create_index('ix_points_entries_profile_id', 'points_entries', ['profile_id'], unique=False)

    op.create_table('reports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.Column('priority_id', sa.Integer(), nullable=True),
        sa.Column('status_id', sa.Integer(), nullable=False),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lon', sa.Float(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=False),
        sa.Column('deleted_at', sa.TIMESTAMP(), nullable=True),
        sa.ForeignKeyConstraint(['author_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.ForeignKeyConstraint(['priority_id'], ['priorities.id']),
        sa.ForeignKeyConstraint(['status_id'], ['statuses.id']),
        sa.PrimaryKeyConstraint('id')
    )
    for column in ('id', 'author_id', 'category_id', 'priority_id', 'status_id', 'created_at', 'deleted_at'):
        op.create_index(f'ix_reports_{column}', 'reports', [column], unique=False)

    op.create_table('report_photos',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('report_id', sa.Integer(), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['report_id'], ['reports.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_report_photos_id', 'report_photos', ['id'], unique=False)
    op.create_index('ix_report_photos_report_id', 'report_photos', ['report_id'], unique=False)

    op.create_table('state_history',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('report_id', sa.Integer(), nullable=False),
        sa.Column('previous_status_id', sa.Integer(), nullable=True),
        sa.Column('new_status_id', sa.Integer(), nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['report_id'], ['reports.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['previous_status_id'], ['statuses.id']),
        sa.ForeignKeyConstraint(['new_status_id'], ['statuses.id']),
        sa.ForeignKeyConstraint(['actor_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_state_history_id', 'state_history', ['id'], unique=False)
    op.create_index('ix_state_history_report_id', 'state_history', ['report_id'], unique=False)
    op.create_index('ix_state_history_new_status_id', 'state_history', ['new_status_id'], unique=False)

    op.create_table('comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('report_id', sa.Integer(), nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=False),
        sa.Column('deleted_at', sa.TIMESTAMP(), nullable=True),
        sa.ForeignKeyConstraint(['report_id'], ['reports.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['author_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    for column in ('id', 'report_id', 'author_id', 'deleted_at'):
        op.create_index(f'ix_comments_{column}', 'comments', [column], unique=False)

    for table, constraint in (
        ('votes_does_not_exist', 'uq_vote_does_not_exist'),
        ('votes_repaired', 'uq_vote_repaired'),
    ):
        op.create_table(table,
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('report_id', sa.Integer(), nullable=False),
            sa.Column('voter_id', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.func.now(), nullable=True),
            sa.ForeignKeyConstraint(['report_id'], ['reports.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['voter_id'], ['profiles.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('report_id', 'voter_id', name=constraint)
        )
        for column in ('id', 'report_id', 'voter_id'):
            op.create_index(f'ix_{table}_{column}', table, [column], unique=False)


def downgrade() -> None:
    for table in (
        'votes_repaired',
        'votes_does_not_exist',
        'comments',
        'state_history',
        'report_photos',
        'reports',
        'points_entries',
        'profiles',
        'users',
        'statuses',
        'priorities',
        'categories',
        'roles',
    ):
        op.drop_table(table)
