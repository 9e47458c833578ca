"""create_users_and_time_entries

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table('users'):
        op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='user'),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not inspector.has_table('time_entries'):
        op.create_table('time_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.Integer(), nullable=True),
        sa.Column('project_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('is_running', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_time_entries_id'), 'time_entries', ['id'], unique=False)
        op.create_index(op.f('ix_time_entries_user_id'), 'time_entries', ['user_id'], unique=False)
        op.create_index(op.f('ix_time_entries_task_id'), 'time_entries', ['task_id'], unique=False)
        op.create_index(op.f('ix_time_entries_project_id'), 'time_entries', ['project_id'], unique=False)

    # Tabla ya existente (base heredada): solo se agrega el indice si falta
    existing = {ix['name'] for ix in sa.inspect(bind).get_indexes('time_entries')}
    if 'uq_time_entries_one_running_per_user' not in existing:
        # Antes de crear el indice, dejar un solo timer corriendo por usuario
        op.execute("""
            UPDATE time_entries SET is_running = false
            WHERE is_running AND id NOT IN (
                SELECT MAX(id) FROM time_entries WHERE is_running GROUP BY user_id
            )
        """)
        op.create_index(
            'uq_time_entries_one_running_per_user',
            'time_entries',
            ['user_id'],
            unique=True,
            postgresql_where=sa.text('is_running'),
        )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('uq_time_entries_one_running_per_user', table_name='time_entries')
    op.drop_table('time_entries')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
