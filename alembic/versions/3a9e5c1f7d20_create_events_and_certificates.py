"""Create events and certificates tables"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '3a9e5c1f7d20'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # Create events table
    op.create_table(
        'events',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('organizer', sa.String(200), nullable=False),
        sa.Column('template', sa.String(100), nullable=False, server_default='certificate-default.html'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id')
    )

    # Create certificates table; the unique constraint guards concurrent issuers
    op.create_table(
        'certificates',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('certificate_number', sa.String(32), nullable=False),
        sa.Column('participant_name', sa.String(200), nullable=False),
        sa.Column('participant_email', sa.String(255), nullable=True),
        sa.Column('event_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('certificate_url', sa.Text(), nullable=False),
        sa.Column('storage_public_id', sa.String(255), nullable=False),
        sa.Column('verification_hash', sa.String(64), nullable=False),
        sa.Column('issued_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('certificate_number', name='uq_certificates_certificate_number')
    )
    op.create_index(op.f('ix_certificates_certificate_number'), 'certificates', ['certificate_number'])
    op.create_index(op.f('ix_certificates_event_id'), 'certificates', ['event_id'])


def downgrade():
    op.drop_index(op.f('ix_certificates_event_id'), table_name='certificates')
    op.drop_index(op.f('ix_certificates_certificate_number'), table_name='certificates')
    op.drop_table('certificates')
    op.drop_table('events')
