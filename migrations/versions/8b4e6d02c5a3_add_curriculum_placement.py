"""add curriculum placement

Revision ID: 8b4e6d02c5a3
Revises: 3f1c2a7b9d10
Create Date: 2025-11-14 09:12:55.204731

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '8b4e6d02c5a3'
down_revision: Union[str, None] = '3f1c2a7b9d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

placement_kind_enum = sa.Enum('GRADE', 'CURRICULUM', name='placementkindenum')

def upgrade() -> None:
    placement_kind_enum.create(op.get_bind(), checkfirst=True)

    # Rows written before this revision all use the subject/grade placement.
    with op.batch_alter_table('lessons') as batch_op:
        batch_op.add_column(sa.Column('placement_kind', placement_kind_enum, nullable=False, server_default='GRADE'))
        batch_op.add_column(sa.Column('level', sa.String(), nullable=True))
        batch_op.add_column(sa.Column('year', sa.String(), nullable=True))
        batch_op.add_column(sa.Column('chapter', sa.String(), nullable=True))
        batch_op.add_column(sa.Column('lesson_type', sa.String(), nullable=True))
        batch_op.add_column(sa.Column('order', sa.Integer(), nullable=True))
        batch_op.alter_column('grade', existing_type=sa.String(), nullable=True)
        batch_op.create_index(batch_op.f('ix_lessons_level'), ['level'], unique=False)
        batch_op.create_index(batch_op.f('ix_lessons_year'), ['year'], unique=False)

def downgrade() -> None:
    op.execute("DELETE FROM links WHERE lesson_id IN (SELECT id FROM lessons WHERE placement_kind = 'CURRICULUM')")
    op.execute("DELETE FROM lessons WHERE placement_kind = 'CURRICULUM'")
    with op.batch_alter_table('lessons') as batch_op:
        batch_op.alter_column('grade', existing_type=sa.String(), nullable=False)
        batch_op.drop_index(batch_op.f('ix_lessons_year'))
        batch_op.drop_index(batch_op.f('ix_lessons_level'))
        batch_op.drop_column('order')
        batch_op.drop_column('lesson_type')
        batch_op.drop_column('chapter')
        batch_op.drop_column('year')
        batch_op.drop_column('level')
        batch_op.drop_column('placement_kind')

    placement_kind_enum.drop(op.get_bind(), checkfirst=True)
