"""initial schema

Revision ID: 3c9e1f7a2b10
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9e1f7a2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    ]


def _company_fk(table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ['company_id'], ['companies.id'],
        name=f'fk_{table}_company_id_companies', ondelete='CASCADE',
    )


def upgrade() -> None:
    op.create_table('companies',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('currency', sa.String(length=3), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    sa.PrimaryKeyConstraint('id', name='pk_companies')
    )

    op.create_table('users',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('email', sa.String(length=255), nullable=False),
    sa.Column('hashed_password', sa.String(length=255), nullable=False),
    sa.Column('full_name', sa.String(length=255), nullable=False),
    sa.Column('role', sa.Enum('ADMIN', 'MANAGER', 'VIEWER', name='role'), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    _company_fk('users'),
    sa.PrimaryKeyConstraint('id', name='pk_users')
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index('ix_users_company_id', ['company_id'], unique=False)
        batch_op.create_index('ix_users_email', ['email'], unique=True)

    op.create_table('refresh_tokens',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('user_id', sa.Uuid(), nullable=False),
    sa.Column('token_hash', sa.String(length=255), nullable=False),
    sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
    sa.Column('revoked', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
    sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_refresh_tokens_user_id_users', ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id', name='pk_refresh_tokens'),
    sa.UniqueConstraint('token_hash', name='uq_refresh_tokens_token_hash')
    )

    # Tender dictionaries
    op.create_table('tender_stages',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('color', sa.String(length=7), nullable=True),
    sa.Column('category', sa.Enum('TENDER_DEPT', 'REALIZATION', 'ARCHIVE', name='stagecategory'), nullable=False),
    sa.Column('sort_order', sa.Integer(), nullable=False),
    *_timestamps(),
    _company_fk('tender_stages'),
    sa.PrimaryKeyConstraint('id', name='pk_tender_stages')
    )
    op.create_table('tender_types',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    *_timestamps(),
    _company_fk('tender_types'),
    sa.PrimaryKeyConstraint('id', name='pk_tender_types')
    )
    op.create_table('tender_platforms',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('url', sa.String(length=500), nullable=True),
    *_timestamps(),
    _company_fk('tender_platforms'),
    sa.PrimaryKeyConstraint('id', name='pk_tender_platforms')
    )
    op.create_table('employees',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('full_name', sa.String(length=255), nullable=False),
    sa.Column('role', sa.String(length=100), nullable=True),
    sa.Column('email', sa.String(length=255), nullable=True),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    *_timestamps(),
    _company_fk('employees'),
    sa.PrimaryKeyConstraint('id', name='pk_employees')
    )
    for table in ('tender_stages', 'tender_types', 'tender_platforms', 'employees'):
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.create_index(f'ix_{table}_company_id', ['company_id'], unique=False)

    op.create_table('tenders',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('purchase_number', sa.String(length=100), nullable=True),
    sa.Column('subject', sa.Text(), nullable=True),
    sa.Column('customer', sa.String(length=500), nullable=True),
    sa.Column('status', sa.Enum('DRAFT', 'ACTIVE', 'WON', 'LOST', 'CANCELLED', 'COMPLETED', 'OVERDUE', name='tenderstatus'), nullable=False),
    sa.Column('stage_id', sa.Uuid(), nullable=True),
    sa.Column('type_id', sa.Uuid(), nullable=True),
    sa.Column('platform_id', sa.Uuid(), nullable=True),
    sa.Column('manager_id', sa.Uuid(), nullable=True),
    sa.Column('specialist_id', sa.Uuid(), nullable=True),
    sa.Column('nmck', sa.BigInteger(), nullable=True),
    sa.Column('contract_price', sa.BigInteger(), nullable=True),
    sa.Column('submission_deadline', sa.DateTime(timezone=True), nullable=True),
    sa.Column('auction_date', sa.DateTime(timezone=True), nullable=True),
    sa.Column('results_date', sa.Date(), nullable=True),
    sa.Column('review_date', sa.Date(), nullable=True),
    sa.Column('loss_reason', sa.String(length=255), nullable=True),
    sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    *_timestamps(),
    _company_fk('tenders'),
    sa.ForeignKeyConstraint(['stage_id'], ['tender_stages.id'], name='fk_tenders_stage_id_tender_stages', ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['type_id'], ['tender_types.id'], name='fk_tenders_type_id_tender_types', ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['platform_id'], ['tender_platforms.id'], name='fk_tenders_platform_id_tender_platforms', ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['manager_id'], ['employees.id'], name='fk_tenders_manager_id_employees', ondelete='SET NULL'),
    sa.ForeignKeyConstraint(['specialist_id'], ['employees.id'], name='fk_tenders_specialist_id_employees', ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id', name='pk_tenders')
    )
    with op.batch_alter_table('tenders', schema=None) as batch_op:
        for column in ('company_id', 'purchase_number', 'status', 'stage_id', 'manager_id', 'specialist_id'):
            batch_op.create_index(f'ix_tenders_{column}', [column], unique=False)

    op.create_table('tender_tasks',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('tender_id', sa.Uuid(), nullable=True),
    sa.Column('title', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
    sa.Column('status', sa.Enum('TODO', 'IN_PROGRESS', 'DONE', name='taskstatus'), nullable=False),
    sa.Column('priority', sa.Enum('LOW', 'NORMAL', 'HIGH', name='taskpriority'), nullable=False),
    sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    *_timestamps(),
    _company_fk('tender_tasks'),
    sa.ForeignKeyConstraint(['tender_id'], ['tenders.id'], name='fk_tender_tasks_tender_id_tenders', ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id', name='pk_tender_tasks')
    )
    with op.batch_alter_table('tender_tasks', schema=None) as batch_op:
        for column in ('company_id', 'tender_id', 'due_date'):
            batch_op.create_index(f'ix_tender_tasks_{column}', [column], unique=False)

    # Finance
    op.create_table('transaction_categories',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=100), nullable=False),
    sa.Column('kind', sa.Enum('INCOME', 'EXPENSE', 'TRANSFER', name='direction'), nullable=False),
    sa.Column('color', sa.String(length=7), nullable=True),
    *_timestamps(),
    _company_fk('transaction_categories'),
    sa.PrimaryKeyConstraint('id', name='pk_transaction_categories'),
    sa.UniqueConstraint('company_id', 'name', name='uq_transaction_category_name')
    )
    with op.batch_alter_table('transaction_categories', schema=None) as batch_op:
        batch_op.create_index('ix_transaction_categories_company_id', ['company_id'], unique=False)

    op.create_table('transactions',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('category_id', sa.Uuid(), nullable=True),
    sa.Column('direction', sa.Enum('INCOME', 'EXPENSE', 'TRANSFER', name='direction'), nullable=False),
    sa.Column('amount', sa.BigInteger(), nullable=False),
    sa.Column('currency', sa.String(length=3), nullable=False),
    sa.Column('description', sa.String(length=1000), nullable=True),
    sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False),
    *_timestamps(),
    _company_fk('transactions'),
    sa.ForeignKeyConstraint(['category_id'], ['transaction_categories.id'], name='fk_transactions_category_id_transaction_categories', ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id', name='pk_transactions')
    )
    with op.batch_alter_table('transactions', schema=None) as batch_op:
        for column in ('company_id', 'category_id', 'direction', 'occurred_at'):
            batch_op.create_index(f'ix_transactions_{column}', [column], unique=False)

    op.create_table('budgets',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('category_id', sa.Uuid(), nullable=True),
    sa.Column('amount_limit', sa.BigInteger(), nullable=False),
    sa.Column('period_type', sa.Enum('MONTHLY', 'QUARTERLY', 'YEARLY', name='periodtype'), nullable=False),
    sa.Column('year', sa.Integer(), nullable=False),
    sa.Column('month', sa.Integer(), nullable=True),
    *_timestamps(),
    _company_fk('budgets'),
    sa.ForeignKeyConstraint(['category_id'], ['transaction_categories.id'], name='fk_budgets_category_id_transaction_categories', ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id', name='pk_budgets'),
    sa.UniqueConstraint('company_id', 'category_id', 'period_type', 'year', 'month', name='uq_budget_category_period')
    )
    with op.batch_alter_table('budgets', schema=None) as batch_op:
        batch_op.create_index('ix_budgets_company_id', ['company_id'], unique=False)
        batch_op.create_index('ix_budgets_category_id', ['category_id'], unique=False)

    op.create_table('savings_goals',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('target_amount', sa.BigInteger(), nullable=False),
    sa.Column('current_amount', sa.BigInteger(), nullable=False),
    sa.Column('target_date', sa.Date(), nullable=True),
    sa.Column('status', sa.Enum('ACTIVE', 'PAUSED', 'COMPLETED', 'CANCELLED', name='goalstatus'), nullable=False),
    *_timestamps(),
    _company_fk('savings_goals'),
    sa.PrimaryKeyConstraint('id', name='pk_savings_goals')
    )
    with op.batch_alter_table('savings_goals', schema=None) as batch_op:
        batch_op.create_index('ix_savings_goals_company_id', ['company_id'], unique=False)

    # Payment calendar
    op.create_table('payment_calendar_items',
    sa.Column('id', sa.Uuid(), nullable=False),
    sa.Column('company_id', sa.Uuid(), nullable=False),
    sa.Column('payment_type', sa.Enum('INCOME', 'EXPENSE', name='paymenttype'), nullable=False),
    sa.Column('category', sa.String(length=100), nullable=True),
    sa.Column('name', sa.String(length=255), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('amount', sa.BigInteger(), nullable=False),
    sa.Column('currency', sa.String(length=3), nullable=False),
    sa.Column('planned_date', sa.Date(), nullable=False),
    sa.Column('actual_date', sa.Date(), nullable=True),
    sa.Column('status', sa.Enum('PLANNED', 'CONFIRMED', 'PAID', 'CANCELLED', 'OVERDUE', name='paymentstatus'), nullable=False),
    sa.Column('priority', sa.Enum('LOW', 'NORMAL', 'HIGH', name='paymentpriority'), nullable=False),
    sa.Column('is_recurring', sa.Boolean(), nullable=False),
    sa.Column('recurrence_pattern', sa.Enum('DAILY', 'WEEKLY', 'MONTHLY', 'QUARTERLY', 'YEARLY', name='recurrence'), nullable=True),
    sa.Column('recurrence_end_date', sa.Date(), nullable=True),
    sa.Column('counterparty_name', sa.String(length=255), nullable=True),
    sa.Column('tender_id', sa.Uuid(), nullable=True),
    sa.Column('notes', sa.Text(), nullable=True),
    *_timestamps(),
    _company_fk('payment_calendar_items'),
    sa.ForeignKeyConstraint(['tender_id'], ['tenders.id'], name='fk_payment_calendar_items_tender_id_tenders', ondelete='SET NULL'),
    sa.PrimaryKeyConstraint('id', name='pk_payment_calendar_items')
    )
    with op.batch_alter_table('payment_calendar_items', schema=None) as batch_op:
        for column in ('company_id', 'planned_date', 'status', 'tender_id'):
            batch_op.create_index(f'ix_payment_calendar_items_{column}', [column], unique=False)


def downgrade() -> None:
    for table in (
        'payment_calendar_items',
        'savings_goals',
        'budgets',
        'transactions',
        'transaction_categories',
        'tender_tasks',
        'tenders',
        'employees',
        'tender_platforms',
        'tender_types',
        'tender_stages',
        'refresh_tokens',
        'users',
        'companies',
    ):
        op.drop_table(table)
