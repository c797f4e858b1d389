"""initial_schema

Revision ID: 4f1a9c2e7b3d
Revises:
Create Date: 2026-10-18 10:12:41.331907

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1a9c2e7b3d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create resume, application and test tables."""
    op.create_table(
        'resumes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False, index=True),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_url', sa.Text, nullable=False, server_default=''),
        sa.Column('raw_text', sa.Text, nullable=False, server_default=''),
        sa.Column('extracted_skills', sa.JSON, nullable=False),
        sa.Column('extracted_experience', sa.JSON, nullable=False),
        sa.Column('extracted_education', sa.JSON, nullable=False),
        sa.Column('summary', sa.Text, nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'job_applications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False, index=True),
        sa.Column('resume_id', sa.String(36), sa.ForeignKey('resumes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('role_title', sa.String(255), nullable=False),
        sa.Column('job_url', sa.Text, nullable=False, server_default=''),
        sa.Column('job_description', sa.Text, nullable=False, server_default=''),
        sa.Column('requirements', sa.JSON, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    op.create_table(
        'tests',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('application_id', sa.String(36), sa.ForeignKey('job_applications.id'), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False, index=True),
        sa.Column('test_type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(255), nullable=False, server_default=''),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('time_limit_minutes', sa.Integer, nullable=False, server_default='60'),
        sa.Column('questions', sa.JSON, nullable=False),
        sa.Column('answers', sa.JSON, nullable=True),
        sa.Column('score', sa.Integer, nullable=True),
        sa.Column('max_score', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False),
        sa.Column('completed_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('application_id', 'test_type', name='uq_tests_application_type'),
    )


def downgrade() -> None:
    """Drop all application tables."""
    op.drop_table('tests')
    op.drop_table('job_applications')
    op.drop_table('resumes')
