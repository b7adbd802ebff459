"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('theme', sa.Enum('light', 'dark', name='theme'), nullable=False, server_default='light'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('icon', sa.String(length=100), nullable=False, server_default='fas fa-tag'),
        sa.Column('color', sa.String(length=7), nullable=False, server_default='#3B82F6'),
        sa.Column('description', sa.String(length=200), nullable=True),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'uq_categories_user_active_name',
        'categories',
        ['user_id', sa.text('lower(name)')],
        unique=True,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active = 1'),
    )
    op.create_index('ix_categories_user_active', 'categories', ['user_id', 'is_active'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column(
            'payment_method',
            sa.Enum('cash', 'credit_card', 'debit_card', 'bank_transfer', 'digital_wallet', 'other', name='payment_method'),
            nullable=False,
            server_default='cash',
        ),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('receipt_url', sa.String(), nullable=True),
        sa.Column('receipt_filename', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expenses_user_date', 'expenses', ['user_id', sa.text('date DESC')])
    op.create_index('ix_expenses_user_category', 'expenses', ['user_id', 'category_id'])
    op.create_index('ix_expenses_user_created', 'expenses', ['user_id', sa.text('created_at DESC')])

    op.create_table(
        'expense_tags',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('expense_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['expense_id'], ['expenses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expense_tags_expense', 'expense_tags', ['expense_id'])
    op.create_index('ix_expense_tags_name', 'expense_tags', ['name'])


def downgrade() -> None:
    op.drop_index('ix_expense_tags_name', table_name='expense_tags')
    op.drop_index('ix_expense_tags_expense', table_name='expense_tags')
    op.drop_table('expense_tags')
    op.drop_index('ix_expenses_user_created', table_name='expenses')
    op.drop_index('ix_expenses_user_category', table_name='expenses')
    op.drop_index('ix_expenses_user_date', table_name='expenses')
    op.drop_table('expenses')
    op.drop_index('ix_categories_user_active', table_name='categories')
    op.drop_index('uq_categories_user_active_name', table_name='categories')
    op.drop_table('categories')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    sa.Enum(name='payment_method').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='theme').drop(op.get_bind(), checkfirst=True)
