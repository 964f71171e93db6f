"""create lessons and links

Revision ID: 3f1c2a7b9d10
Revises: 
Create Date: 2025-10-02 18:41:07.512904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '3f1c2a7b9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    op.create_table(
        'lessons',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('grade', sa.String(), nullable=False),
        sa.Column('pdf_url', sa.String(), nullable=True),
        sa.Column('video_url', sa.String(), nullable=True),
        sa.Column('published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_by', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_lessons_title'), 'lessons', ['title'], unique=False)
    op.create_index(op.f('ix_lessons_subject'), 'lessons', ['subject'], unique=False)
    op.create_index(op.f('ix_lessons_grade'), 'lessons', ['grade'], unique=False)
    op.create_index(op.f('ix_lessons_published'), 'lessons', ['published'], unique=False)

    op.create_table(
        'links',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('lesson_id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_links_lesson_id'), 'links', ['lesson_id'], unique=False)

def downgrade() -> None:
    op.drop_index(op.f('ix_links_lesson_id'), table_name='links')
    op.drop_table('links')
    op.drop_index(op.f('ix_lessons_published'), table_name='lessons')
    op.drop_index(op.f('ix_lessons_grade'), table_name='lessons')
    op.drop_index(op.f('ix_lessons_subject'), table_name='lessons')
    op.drop_index(op.f('ix_lessons_title'), table_name='lessons')
    op.drop_table('lessons')
