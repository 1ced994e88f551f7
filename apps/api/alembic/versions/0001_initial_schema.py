"""Initial schema - organizations, users, cases, sightings, photo embeddings

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

Ids are generated by the application (uuid4), so the tables carry no
server-side id defaults and the schema runs on PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False)]
    if with_updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False))
    return columns


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Organizations & users
    # ==========================================================================
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('contact_email', sa.String(255), nullable=False),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('verification_status', sa.String(20), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('contact_email', name='uq_organizations_contact_email'),
    )
    op.create_index('idx_organizations_verification', 'organizations', ['verification_status'])

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column(
            'organization_id',
            sa.Uuid(),
            sa.ForeignKey('organizations.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('idx_users_org_id', 'users', ['organization_id'])

    # ==========================================================================
    # Cases
    # ==========================================================================
    op.create_table(
        'cases',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('case_number', sa.String(64), nullable=False),
        sa.Column('child_name', sa.String(255), nullable=False),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('last_seen_location', sa.String(500), nullable=False),
        sa.Column('last_seen_date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(20), nullable=False),
        sa.Column(
            'organization_id',
            sa.Uuid(),
            sa.ForeignKey('organizations.id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column(
            'created_by',
            sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column('photo_urls', sa.JSON(), nullable=False),
        sa.Column('additional_info', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('case_number', name='uq_case_number'),
        sa.CheckConstraint('age IS NULL OR age >= 0', name='ck_cases_age_non_negative'),
    )
    op.create_index('idx_cases_status', 'cases', ['status'])
    op.create_index('idx_cases_org_id', 'cases', ['organization_id'])
    op.create_index('idx_cases_created_at', 'cases', ['created_at'])

    # ==========================================================================
    # Sightings
    # ==========================================================================
    op.create_table(
        'sightings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'case_id',
            sa.Uuid(),
            sa.ForeignKey('cases.id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column('reporter_name', sa.String(255), nullable=False),
        sa.Column('reporter_email', sa.String(255), nullable=False),
        sa.Column('reporter_phone', sa.String(50), nullable=False),
        sa.Column('sighting_location', sa.String(500), nullable=False),
        sa.Column('sighting_date', sa.Date(), nullable=False),
        sa.Column('sighting_time', sa.String(20), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('photo_urls', sa.JSON(), nullable=False),
        sa.Column('confidence_level', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column(
            'verified_by',
            sa.Uuid(),
            sa.ForeignKey('users.id', ondelete='SET NULL'),
            nullable=True,
        ),
        *_timestamps(),
        sa.CheckConstraint(
            'confidence_level IS NULL OR (confidence_level >= 1 AND confidence_level <= 5)',
            name='ck_sightings_confidence_level',
        ),
    )
    op.create_index('idx_sightings_case_id', 'sightings', ['case_id'])
    op.create_index('idx_sightings_status', 'sightings', ['status'])

    # ==========================================================================
    # Photo embeddings
    # ==========================================================================
    op.create_table(
        'photo_embeddings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'case_id',
            sa.Uuid(),
            sa.ForeignKey('cases.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('photo_url', sa.String(500), nullable=False),
        sa.Column('embedding', sa.JSON(), nullable=False),
        *_timestamps(with_updated=False),
    )
    op.create_index('idx_photo_embeddings_case_id', 'photo_embeddings', ['case_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('photo_embeddings')
    op.drop_table('sightings')
    op.drop_table('cases')
    op.drop_table('users')
    op.drop_table('organizations')
