"""init_booking_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- booking: bookings with the partial unique index on active (date, time)
- closed_slot_config: manually closed slots per date (versioned)
- pricing_config: package catalog and add-on price documents (versioned)
- promo_code / promo_redemption: promo codes and per-booking redemptions
- referral_credit: referral codes, counters and referee discounts
- staff_shift: staff assignments per date and slot
- audit_log: append-only audit trail
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ACTIVE_STATUS_PREDICATE = sa.text(
    "status IN ('confirmed', 'in_progress', 'on_the_way', 'pending')"
)


def upgrade() -> None:
    """Create all tables with final schema."""

    op.create_table(
        'booking',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('booking_number', sa.String(length=32), nullable=False),
        sa.Column('customer_kind', sa.String(length=20), nullable=False),
        sa.Column('customer_id', sa.String(length=64), nullable=True),
        sa.Column('guest_session_id', sa.String(length=64), nullable=True),
        sa.Column('guest_phone', sa.String(length=20), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('customer_phone', sa.String(length=20), nullable=True),
        sa.Column('source', sa.String(length=10), nullable=False),
        sa.Column('entered_by', sa.String(length=255), nullable=True),
        sa.Column('package_id', sa.String(length=32), nullable=False),
        sa.Column('vehicle_type', sa.String(length=20), nullable=False),
        sa.Column('vehicle_size', sa.String(length=10), nullable=True),
        sa.Column('vehicle_id', sa.String(length=64), nullable=True),
        sa.Column('add_ons', sa.JSON(), nullable=False),
        sa.Column('is_subscription', sa.Boolean(), nullable=False),
        sa.Column('promo_code_id', sa.Uuid(), nullable=True),
        sa.Column('promo_code', sa.String(length=64), nullable=True),
        sa.Column('promo_discount', sa.JSON(), nullable=True),
        sa.Column('referral_discount', sa.JSON(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.String(length=5), nullable=False),
        sa.Column('location', sa.JSON(), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('price_breakdown', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('started_journey_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_booking'),
        sa.UniqueConstraint('booking_number', name='uq_booking_booking_number'),
    )
    op.create_index('ix_booking_customer_id', 'booking', ['customer_id'])
    op.create_index('ix_booking_guest_session_id', 'booking', ['guest_session_id'])
    op.create_index('ix_booking_date', 'booking', ['date'])
    op.create_index('ix_booking_status', 'booking', ['status'])
    op.create_index('ix_booking_guest_phone_kind', 'booking', ['guest_phone', 'customer_kind'])
    # At most one active booking per slot
    op.create_index(
        'uq_booking_active_slot',
        'booking',
        ['date', 'time'],
        unique=True,
        postgresql_where=ACTIVE_STATUS_PREDICATE,
        sqlite_where=ACTIVE_STATUS_PREDICATE,
    )

    op.create_table(
        'closed_slot_config',
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('slot_ids', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('date', name='pk_closed_slot_config'),
    )

    op.create_table(
        'pricing_config',
        sa.Column('key', sa.String(length=32), nullable=False),
        sa.Column('document', sa.JSON(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('key', name='pk_pricing_config'),
    )

    op.create_table(
        'promo_code',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(length=64), nullable=False),
        sa.Column('discount_type', sa.String(length=20), nullable=False),
        sa.Column('discount_value', sa.Integer(), nullable=False),
        sa.Column('max_uses', sa.Integer(), nullable=False),
        sa.Column('current_uses', sa.Integer(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('applicable_packages', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_by', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_promo_code'),
        sa.UniqueConstraint('code', name='uq_promo_code_code'),
    )

    op.create_table(
        'promo_redemption',
        sa.Column('booking_id', sa.Uuid(), nullable=False),
        sa.Column('promo_code_id', sa.Uuid(), nullable=False),
        sa.Column('redeemed_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['booking_id'],
            ['booking.id'],
            name='fk_promo_redemption_booking_id_booking',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['promo_code_id'],
            ['promo_code.id'],
            name='fk_promo_redemption_promo_code_id_promo_code',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('booking_id', name='pk_promo_redemption'),
    )

    op.create_table(
        'referral_credit',
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('referral_code', sa.String(length=16), nullable=False),
        sa.Column('referred_by', sa.String(length=64), nullable=True),
        sa.Column('referred_by_code', sa.String(length=16), nullable=True),
        sa.Column('referral_count', sa.Integer(), nullable=False),
        sa.Column('successful_referrals', sa.Integer(), nullable=False),
        sa.Column('pending_referrals', sa.Integer(), nullable=False),
        sa.Column('total_rewards_earned', sa.Integer(), nullable=False),
        sa.Column('referee_discount', sa.JSON(), nullable=True),
        sa.Column('referee_reward_used', sa.Boolean(), nullable=False),
        sa.Column('referee_reward_booking_id', sa.Uuid(), nullable=True),
        sa.Column('referral_completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('user_id', name='pk_referral_credit'),
        sa.UniqueConstraint('referral_code', name='uq_referral_credit_referral_code'),
    )
    op.create_index('ix_referral_credit_referred_by', 'referral_credit', ['referred_by'])

    op.create_table(
        'staff_shift',
        sa.Column('staff_id', sa.String(length=255), nullable=False),
        sa.Column('shift_date', sa.Date(), nullable=False),
        sa.Column('time_slot', sa.String(length=5), nullable=False),
        sa.PrimaryKeyConstraint('staff_id', 'shift_date', 'time_slot', name='pk_staff_shift'),
    )

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('performed_by', sa.String(length=255), nullable=False),
        sa.Column('performed_by_role', sa.String(length=20), nullable=False),
        sa.Column('target_id', sa.String(length=64), nullable=True),
        sa.Column('details', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_audit_log'),
    )
    op.create_index('ix_audit_log_target_id', 'audit_log', ['target_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('audit_log')
    op.drop_table('staff_shift')
    op.drop_index('ix_referral_credit_referred_by', table_name='referral_credit')
    op.drop_table('referral_credit')
    op.drop_table('promo_redemption')
    op.drop_table('promo_code')
    op.drop_table('pricing_config')
    op.drop_table('closed_slot_config')
    op.drop_index('uq_booking_active_slot', table_name='booking')
    op.drop_table('booking')
