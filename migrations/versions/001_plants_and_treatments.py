"""Create plants and treatments tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create plants and treatments tables"""

    # 1. Create plants table
    op.create_table('plants',
        sa.Column('id', sa.Uuid(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('plant_name', sa.String(255), nullable=True),
        sa.Column('diagnosis', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id', name='pk_plants'),
    )

    op.create_index('ix_plants_user_id', 'plants', ['user_id'])

    # 2. Create treatments table
    op.create_table('treatments',
        sa.Column('id', sa.Uuid(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('plant_id', sa.Uuid(), nullable=False),
        sa.Column('step', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('completed', sa.Boolean(), server_default=sa.text('false'), nullable=False),

        sa.PrimaryKeyConstraint('id', name='pk_treatments'),
        sa.ForeignKeyConstraint(
            ['plant_id'], ['plants.id'],
            name='fk_treatments_plant_id_plants',
            ondelete='CASCADE',
        ),
        sa.UniqueConstraint('plant_id', 'step', name='uq_treatments_plant_id_step'),
    )

    op.create_index('ix_treatments_plant_id', 'treatments', ['plant_id'])


def downgrade() -> None:
    """Drop plants and treatments tables"""
    op.drop_index('ix_treatments_plant_id', table_name='treatments')
    op.drop_table('treatments')

    op.drop_index('ix_plants_user_id', table_name='plants')
    op.drop_table('plants')
