"""Create lease, invoicing and notification tables

Revision ID: 20261001_000001
Revises: None
Create Date: 2026-10-01

Creates users, properties, leases, invoices, invoice_items, payments,
notifications and user_preferences.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261001_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('role', sa.Enum('landlord', 'tenant', 'admin', name='user_role'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('landlord_id', sa.String(36), nullable=False),
        sa.Column('address', sa.String(500), nullable=True),
        sa.Column(
            'status',
            sa.Enum('available', 'occupied', 'inactive', name='property_status'),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['landlord_id'], ['users.id'], name='fk_properties_landlord_id'),
    )
    op.create_index('ix_properties_landlord_id', 'properties', ['landlord_id'])
    op.create_index('ix_properties_status', 'properties', ['status'])

    op.create_table(
        'leases',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('landlord_id', sa.String(36), nullable=False),
        sa.Column('tenant_id', sa.String(36), nullable=False),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('deposit', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('terms', sa.Text(), nullable=False),
        sa.Column('landlord_signature', sa.String(255), nullable=True),
        sa.Column('tenant_signature', sa.String(255), nullable=True),
        sa.Column(
            'status',
            sa.Enum('draft', 'pending_signatures', 'active', 'expired', 'terminated', name='lease_status'),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_leases_property_id'),
        sa.ForeignKeyConstraint(['landlord_id'], ['users.id'], name='fk_leases_landlord_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_leases_tenant_id'),
    )
    op.create_index('ix_leases_property_id', 'leases', ['property_id'])
    op.create_index('ix_leases_landlord_id', 'leases', ['landlord_id'])
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])
    op.create_index('ix_leases_end_date', 'leases', ['end_date'])
    op.create_index('ix_leases_status', 'leases', ['status'])

    op.create_table(
        'invoices',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('landlord_id', sa.String(36), nullable=False),
        sa.Column('billing_period', sa.String(7), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'paid', 'overdue', name='invoice_status', create_constraint=True),
            nullable=False,
        ),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['landlord_id'], ['users.id'], name='fk_invoices_landlord_id'),
        sa.UniqueConstraint('landlord_id', 'billing_period', name='uq_invoices_landlord_period'),
    )
    op.create_index('ix_invoices_landlord_id', 'invoices', ['landlord_id'])
    op.create_index('ix_invoices_billing_period', 'invoices', ['billing_period'])
    op.create_index('ix_invoices_due_date', 'invoices', ['due_date'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])

    op.create_table(
        'invoice_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('invoice_id', sa.String(36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('lease_id', sa.String(36), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['invoice_id'], ['invoices.id'],
            name='fk_invoice_items_invoice_id',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(['lease_id'], ['leases.id'], name='fk_invoice_items_lease_id'),
    )
    op.create_index('ix_invoice_items_invoice_id', 'invoice_items', ['invoice_id'])
    op.create_index('ix_invoice_items_lease_id', 'invoice_items', ['lease_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('invoice_id', sa.String(36), nullable=False),
        sa.Column('landlord_id', sa.String(36), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'payment_method',
            sa.Enum('bank_transfer', 'card', 'cash', name='payment_method'),
            nullable=False,
        ),
        sa.Column('reference', sa.String(255), nullable=False),
        sa.Column('payment_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['invoice_id'], ['invoices.id'],
            name='fk_payments_invoice_id',
            ondelete='RESTRICT',
        ),
        sa.ForeignKeyConstraint(['landlord_id'], ['users.id'], name='fk_payments_landlord_id'),
    )
    op.create_index('ix_payments_invoice_id', 'payments', ['invoice_id'])
    op.create_index('ix_payments_landlord_id', 'payments', ['landlord_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column(
            'type',
            sa.Enum(
                'new_lead', 'new_message', 'maintenance_request', 'lease_expiring',
                'payment_due', 'payment_received', 'listing_approved',
                name='notification_type',
            ),
            nullable=False,
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column(
            'priority',
            sa.Enum('low', 'medium', 'high', name='notification_priority'),
            nullable=False,
        ),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('grouped_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_type', 'notifications', ['type'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    op.create_table(
        'user_preferences',
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('email_enabled', sa.Boolean(), nullable=False),
        sa.Column('sms_enabled', sa.Boolean(), nullable=False),
        sa.Column('in_app_enabled', sa.Boolean(), nullable=False),
        sa.Column('types', sa.JSON(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('user_id'),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_user_preferences_user_id',
            ondelete='CASCADE',
        ),
    )


def downgrade() -> None:
    op.drop_table('user_preferences')
    op.drop_index('ix_notifications_created_at', table_name='notifications')
    op.drop_index('ix_notifications_type', table_name='notifications')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_payments_landlord_id', table_name='payments')
    op.drop_index('ix_payments_invoice_id', table_name='payments')
    op.drop_table('payments')
    op.drop_index('ix_invoice_items_lease_id', table_name='invoice_items')
    op.drop_index('ix_invoice_items_invoice_id', table_name='invoice_items')
    op.drop_table('invoice_items')
    op.drop_index('ix_invoices_status', table_name='invoices')
    op.drop_index('ix_invoices_due_date', table_name='invoices')
    op.drop_index('ix_invoices_billing_period', table_name='invoices')
    op.drop_index('ix_invoices_landlord_id', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_leases_status', table_name='leases')
    op.drop_index('ix_leases_end_date', table_name='leases')
    op.drop_index('ix_leases_tenant_id', table_name='leases')
    op.drop_index('ix_leases_landlord_id', table_name='leases')
    op.drop_index('ix_leases_property_id', table_name='leases')
    op.drop_table('leases')
    op.drop_index('ix_properties_status', table_name='properties')
    op.drop_index('ix_properties_landlord_id', table_name='properties')
    op.drop_table('properties')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
