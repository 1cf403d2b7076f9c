"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from federaltalks.utils.column_types import GUID, StringList, JSONDict

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==========================================================================
    # USERS
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), default=False),
        sa.Column('trial_days_remaining', sa.Integer(), default=0),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # ==========================================================================
    # INTERNAL USERS
    # ==========================================================================
    op.create_table(
        'internal_users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=False, server_default='assistance'),
        sa.Column('permissions', StringList(), nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_by', GUID(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_internal_users_email', 'internal_users', ['email'], unique=True)

    # ==========================================================================
    # CONTRACTS
    # ==========================================================================
    op.create_table(
        'contracts',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('federal_id', sa.String(32), nullable=False),
        sa.Column('contract_number', sa.String(100), nullable=True),
        sa.Column('solicitation_number', sa.String(100), nullable=True),
        sa.Column('contract_type', sa.String(20), nullable=False, server_default='federal'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('contract_status', sa.String(20), nullable=False, server_default='open'),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('contract_name', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('products_services', sa.Text(), nullable=True),
        sa.Column('primary_requirement', sa.Text(), nullable=True),
        sa.Column('keywords', StringList(), nullable=True),
        sa.Column('contractors', sa.Text(), nullable=True),
        sa.Column('agency', sa.String(255), nullable=False),
        sa.Column('buying_organization', sa.String(255), nullable=True),
        sa.Column('department', sa.String(255), nullable=True),
        sa.Column('buying_org_level_1', sa.String(255), nullable=True),
        sa.Column('buying_org_level_2', sa.String(255), nullable=True),
        sa.Column('buying_org_level_3', sa.String(255), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('place_of_performance_location', sa.String(255), nullable=True),
        sa.Column('contact_first_name', sa.String(255), nullable=True),
        sa.Column('contact_phone', sa.String(50), nullable=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('budget_min', sa.Float(), nullable=True),
        sa.Column('budget_max', sa.Float(), nullable=True),
        sa.Column('award_value', sa.Float(), nullable=True),
        sa.Column('naics_code', sa.String(10), nullable=True),
        sa.Column('set_aside_code', sa.String(50), nullable=True),
        sa.Column('award_date', sa.Date(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('current_expiration_date', sa.Date(), nullable=True),
        sa.Column('ultimate_expiration_date', sa.Date(), nullable=True),
        sa.Column('response_deadline', sa.DateTime(), nullable=True),
        sa.Column('posted_date', sa.DateTime(), nullable=True),
        sa.Column('source_url', sa.Text(), nullable=True),
        sa.Column('ai_analysis_summary', sa.Text(), nullable=True),
        sa.Column('data_source', sa.String(20), nullable=True),
        sa.Column('updated_by', GUID(), nullable=True),
        sa.Column('last_updated', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_contracts_federal_id', 'contracts', ['federal_id'], unique=True)
    op.create_index('ix_contracts_solicitation_number', 'contracts', ['solicitation_number'])
    op.create_index('ix_contracts_contract_type', 'contracts', ['contract_type'])
    op.create_index('ix_contracts_status', 'contracts', ['status'])
    op.create_index('ix_contracts_agency', 'contracts', ['agency'])
    op.create_index('ix_contracts_state', 'contracts', ['state'])
    op.create_index('ix_contracts_naics_code', 'contracts', ['naics_code'])
    op.create_index('ix_contracts_response_deadline', 'contracts', ['response_deadline'])
    op.create_index('ix_contracts_posted_date', 'contracts', ['posted_date'])

    # ==========================================================================
    # CONTACTS
    # ==========================================================================
    op.create_table(
        'contacts',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('agency', sa.String(255), nullable=False),
        sa.Column('department', sa.String(255), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('contact_type', sa.String(20), nullable=False, server_default='procurement'),
        sa.Column('is_federal', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('data_source', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_contacts_full_name', 'contacts', ['full_name'])
    op.create_index('ix_contacts_agency', 'contacts', ['agency'])
    op.create_index('ix_contacts_state', 'contacts', ['state'])

    # ==========================================================================
    # UPLOAD LOGS
    # ==========================================================================
    op.create_table(
        'upload_logs',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('uploaded_by', GUID(), nullable=True),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_type', sa.String(255), nullable=True),
        sa.Column('upload_type', sa.String(20), nullable=False),
        sa.Column('records_processed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('records_successful', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('records_failed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('error_details', JSONDict(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_upload_logs_uploaded_by', 'upload_logs', ['uploaded_by'])
    op.create_index('ix_upload_logs_created_at', 'upload_logs', ['created_at'])

    # ==========================================================================
    # PIPELINES
    # ==========================================================================
    op.create_table(
        'pipelines',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_default', sa.Boolean(), default=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pipelines_user_id', 'pipelines', ['user_id'])

    op.create_table(
        'pipeline_stages',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('pipeline_id', GUID(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('color', sa.String(20), nullable=False, server_default='#6B7280'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['pipeline_id'], ['pipelines.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pipeline_stages_pipeline_id', 'pipeline_stages', ['pipeline_id'])

    op.create_table(
        'pipeline_entries',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('pipeline_id', GUID(), nullable=False),
        sa.Column('contract_id', GUID(), nullable=False),
        sa.Column('stage_id', GUID(), nullable=False),
        sa.Column('assigned_to', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('probability', sa.Integer(), nullable=False, server_default='25'),
        sa.Column('estimated_value', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['pipeline_id'], ['pipelines.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['contract_id'], ['contracts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['stage_id'], ['pipeline_stages.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_pipeline_entries_pipeline_id', 'pipeline_entries', ['pipeline_id'])
    op.create_index('ix_pipeline_entries_contract_id', 'pipeline_entries', ['contract_id'])
    op.create_index('ix_pipeline_entries_stage_id', 'pipeline_entries', ['stage_id'])

    # ==========================================================================
    # USER FAVORITES
    # ==========================================================================
    op.create_table(
        'user_favorites',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('contract_id', GUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['contract_id'], ['contracts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'contract_id', name='uq_user_favorites_user_contract')
    )
    op.create_index('ix_user_favorites_user_id', 'user_favorites', ['user_id'])
    op.create_index('ix_user_favorites_contract_id', 'user_favorites', ['contract_id'])


def downgrade() -> None:
    op.drop_table('user_favorites')
    op.drop_table('pipeline_entries')
    op.drop_table('pipeline_stages')
    op.drop_table('pipelines')
    op.drop_table('upload_logs')
    op.drop_table('contacts')
    op.drop_table('contracts')
    op.drop_table('internal_users')
    op.drop_table('users')
