"""Create documents table

Revision ID: 001_documents
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_documents'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'documents',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=255), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('file_path', sa.String(length=1000), nullable=False),
        sa.Column('file_type', sa.String(length=255), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False),
        sa.Column('extracted_text', sa.Text(), nullable=True),
        sa.Column(
            'category',
            sa.Enum('research', 'notes', 'pyq', 'general', name='document_category', native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column('subject', sa.String(length=255), nullable=True),
        sa.Column('semester', sa.Integer(), nullable=True),
        sa.Column('academic_year', sa.String(length=9), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_path'),
    )
    op.create_index(op.f('ix_documents_owner_id'), 'documents', ['owner_id'], unique=False)
    op.create_index('ix_documents_owner_category_created', 'documents', ['owner_id', 'category', 'created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_documents_owner_category_created', table_name='documents')
    op.drop_index(op.f('ix_documents_owner_id'), table_name='documents')
    op.drop_table('documents')
