"""Create users, customers and daily_logs tables

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_000001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), server_default='employee'),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('country_code', sa.String(10), nullable=True),
        sa.Column('company', sa.String(200), nullable=True),
        sa.Column('status', sa.String(20), server_default='prospect'),
        # "unassigned" sentinel rather than NULL when nobody owns the customer
        sa.Column('assigned_employee_id', sa.String(50), nullable=False, server_default='unassigned'),
        sa.Column('assigned_employee_name', sa.String(200), nullable=True),
        sa.Column('dob', sa.String(10), nullable=True),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('nationality', sa.String(100), nullable=True),
        sa.Column('destination', sa.String(200), nullable=True),
        sa.Column('purpose', sa.String(200), nullable=True),
        sa.Column('travel_from', sa.String(10), nullable=True),
        sa.Column('travel_to', sa.String(10), nullable=True),
        sa.Column('budget', sa.String(50), nullable=True),
        sa.Column('travel_type', sa.String(50), nullable=True),
        sa.Column('hotel', sa.String(200), nullable=True),
        sa.Column('service', sa.String(50), nullable=True),
        sa.Column('insurance', sa.Boolean(), server_default=sa.false()),
        sa.Column('pickup', sa.Boolean(), server_default=sa.false()),
        sa.Column('tours', sa.Boolean(), server_default=sa.false()),
        sa.Column('is_travelling', sa.Boolean(), server_default=sa.false()),
        sa.Column('travelling_start_date', sa.String(10), nullable=True),
        sa.Column('previous_visits', sa.Text(), nullable=True),
        sa.Column('passport_number', sa.String(50), nullable=True),
        sa.Column('passport_expiry', sa.String(10), nullable=True),
        sa.Column('visa_status', sa.String(50), nullable=True),
        sa.Column('emergency_contact', sa.String(200), nullable=True),
        sa.Column('emergency_phone', sa.String(50), nullable=True),
        sa.Column('special_requirements', sa.Text(), nullable=True),
        sa.Column('group_travelers', sa.JSON(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('last_contact', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_customers_email', 'customers', ['email'])
    op.create_index('ix_customers_phone', 'customers', ['phone'])
    op.create_index('ix_customers_status', 'customers', ['status'])
    op.create_index('ix_customers_assigned_employee_id', 'customers', ['assigned_employee_id'])

    # No foreign keys: logs outlive the customers and users they mention
    op.create_table(
        'daily_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('customer_name', sa.String(200), nullable=True),
        sa.Column('employee_id', sa.String(50), nullable=True),
        sa.Column('employee_name', sa.String(200), nullable=True),
        sa.Column('type', sa.String(20), server_default='note'),
        sa.Column('outcome', sa.String(20), server_default='neutral'),
        sa.Column('subject', sa.String(300), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('follow_up_required', sa.Boolean(), server_default=sa.false()),
        sa.Column('follow_up_date', sa.String(32), nullable=True),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_daily_logs_customer_id', 'daily_logs', ['customer_id'])
    op.create_index('ix_daily_logs_employee_id', 'daily_logs', ['employee_id'])
    op.create_index('ix_daily_logs_date', 'daily_logs', ['date'])


def downgrade():
    op.drop_index('ix_daily_logs_date', table_name='daily_logs')
    op.drop_index('ix_daily_logs_employee_id', table_name='daily_logs')
    op.drop_index('ix_daily_logs_customer_id', table_name='daily_logs')
    op.drop_table('daily_logs')

    op.drop_index('ix_customers_assigned_employee_id', table_name='customers')
    op.drop_index('ix_customers_status', table_name='customers')
    op.drop_index('ix_customers_phone', table_name='customers')
    op.drop_index('ix_customers_email', table_name='customers')
    op.drop_table('customers')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
