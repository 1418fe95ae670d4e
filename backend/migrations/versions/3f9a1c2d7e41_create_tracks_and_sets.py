"""create_tracks_and_sets

Revision ID: 3f9a1c2d7e41
Revises: 
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '3f9a1c2d7e41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = sa.inspect(bind)
    tables = insp.get_table_names()
    
    if 'tracks' not in tables:
        op.create_table(
            'tracks',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('artist', sa.String(), nullable=False),
            sa.Column('bpm', sa.Float(), nullable=False),
            sa.Column('key', sa.String(), nullable=False),
            sa.Column('genre', sa.String(), nullable=False),
            sa.Column('subgenre', sa.String(), nullable=True),
            sa.Column('duration', sa.String(), nullable=False),
            sa.Column('links', sa.JSON(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
            sa.PrimaryKeyConstraint('id'),
        )
        for column in ('title', 'artist', 'bpm', 'key', 'genre', 'created_at'):
            op.create_index(f'ix_tracks_{column}', 'tracks', [column])
    
    if 'sets' not in tables:
        op.create_table(
            'sets',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('track_ids', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
            sa.PrimaryKeyConstraint('id'),
        )
        for column in ('name', 'created_at'):
            op.create_index(f'ix_sets_{column}', 'sets', [column])


def downgrade() -> None:
    op.drop_table('sets')
    op.drop_table('tracks')
