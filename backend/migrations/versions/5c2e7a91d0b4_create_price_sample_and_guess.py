"""create price_sample and guess tables

Revision ID: 5c2e7a91d0b4
Revises:
Create Date: 2025-09-14 10:20:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e7a91d0b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'price_sample' not in existing_tables:
        op.create_table(
            'price_sample',
            sa.Column('timestamp', sa.DateTime(), nullable=False),
            sa.Column('price', sa.Numeric(precision=20, scale=8), nullable=False),
            sa.PrimaryKeyConstraint('timestamp'),
        )

    if 'guess' not in existing_tables:
        op.create_table(
            'guess',
            sa.Column('guess_id', sa.String(length=36), nullable=False),
            sa.Column('player_uid', sa.Text(), nullable=False),
            sa.Column('direction', sa.Enum('lower', 'higher', name='guess_type'), nullable=False),
            sa.Column('timestamp', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('guess_id'),
        )
        with op.batch_alter_table('guess') as batch_op:
            batch_op.create_index('ix_guess_player_uid', ['player_uid'], unique=False)


def downgrade():
    with op.batch_alter_table('guess') as batch_op:
        batch_op.drop_index('ix_guess_player_uid')
    op.drop_table('guess')
    sa.Enum(name='guess_type').drop(op.get_bind(), checkfirst=True)
    op.drop_table('price_sample')
