"""create reports table

Revision ID: 3f1c2a9d7b10
Revises: 
Create Date: 2025-10-02 11:24:08.512301

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

report_status = sa.Enum('pending', 'in_progress', 'cleaned', name='report_status')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'reports',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('citizen_device_id', sa.String(255), nullable=False),
        sa.Column('lat', sa.Float, nullable=False),
        sa.Column('lng', sa.Float, nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('initial_photo_url', sa.String, nullable=False),
        sa.Column('category', sa.String(64), nullable=False, server_default='Other'),
        sa.Column('severity', sa.String(16), nullable=False, server_default='Medium'),
        sa.Column('status', report_status, nullable=False, server_default='pending'),
        sa.Column('upvotes', sa.Integer, nullable=False, server_default=sa.text('0')),
        sa.Column('cleanup_photo_url', sa.String, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.text("(now() at time zone 'utc')")),
        sa.Column('cleaned_at', sa.DateTime, nullable=True),
        sa.CheckConstraint('upvotes >= 0', name='ck_reports_upvotes_non_negative'),
        sa.CheckConstraint(
            "(status = 'cleaned') = (cleaned_at IS NOT NULL)",
            name='ck_reports_cleaned_at_matches_status',
        ),
    )
    op.create_index('ix_reports_id', 'reports', ['id'])
    op.create_index('ix_reports_citizen_device_id', 'reports', ['citizen_device_id'])
    op.create_index('ix_reports_status', 'reports', ['status'])
    op.create_index('ix_reports_created_at', 'reports', ['created_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_reports_created_at', table_name='reports')
    op.drop_index('ix_reports_status', table_name='reports')
    op.drop_index('ix_reports_citizen_device_id', table_name='reports')
    op.drop_index('ix_reports_id', table_name='reports')
    op.drop_table('reports')
    report_status.drop(op.get_bind(), checkfirst=True)
