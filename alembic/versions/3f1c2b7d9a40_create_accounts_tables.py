"""create_accounts_tables

Revision ID: 3f1c2b7d9a40
Revises:
Create Date: 2026-10-19 10:12:41.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2b7d9a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the account directory schema.

    Creates:
    - accounts table (single-table inheritance, discriminated by role)
    - company_employees table (owner side of each assignment)
    """
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=True),
        sa.Column('role', sa.Enum('admin', 'employee', 'companyOwner', name='accountrole', native_enum=False), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('salary', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('owner_id', sa.Integer(), nullable=True),
        sa.Column('company_name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_name'),
    )
    op.create_index(op.f('ix_accounts_external_id'), 'accounts', ['external_id'], unique=True)
    op.create_index(op.f('ix_accounts_role'), 'accounts', ['role'], unique=False)
    op.create_index(op.f('ix_accounts_owner_id'), 'accounts', ['owner_id'], unique=False)

    op.create_table(
        'company_employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['accounts.id']),
        sa.ForeignKeyConstraint(['employee_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id'),
    )
    op.create_index(op.f('ix_company_employees_owner_id'), 'company_employees', ['owner_id'], unique=False)


def downgrade() -> None:
    """Drop the account directory schema."""
    op.drop_index(op.f('ix_company_employees_owner_id'), table_name='company_employees')
    op.drop_table('company_employees')
    op.drop_index(op.f('ix_accounts_owner_id'), table_name='accounts')
    op.drop_index(op.f('ix_accounts_role'), table_name='accounts')
    op.drop_index(op.f('ix_accounts_external_id'), table_name='accounts')
    op.drop_table('accounts')
