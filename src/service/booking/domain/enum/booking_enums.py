from enum import StrEnum


class BookingSource(StrEnum):
    CUSTOMER = 'customer'
    STAFF = 'staff'


class CustomerKind(StrEnum):
    CUSTOMER = 'customer'
    GUEST = 'guest'
    STAFF_ENTERED = 'staff_entered'


class PaymentMethod(StrEnum):
    CASH = 'cash'
    CARD = 'card'
    GEIDEA = 'geidea'
    PAYMENT_LINK = 'payment_link'


class DiscountType(StrEnum):
    PERCENTAGE = 'percentage'
    FIXED = 'fixed'


class UserRole(StrEnum):
    CUSTOMER = 'customer'
    STAFF = 'staff'
    MANAGER = 'manager'


class GuestSessionStatus(StrEnum):
    VALID = 'valid'
    EXPIRED = 'expired'
    MISMATCHED = 'mismatched'
    ABSENT = 'absent'


class AuditAction(StrEnum):
    BOOKING_CREATED = 'booking_created'
    STAFF_ORDER_CREATED = 'staff_order_created'
    BOOKING_STATUS_CHANGED = 'booking_status_changed'
    BOOKING_EDITED = 'booking_edited'
    CLOSED_SLOTS_UPDATED = 'closed_slots_updated'
    ADD_ONS_UPDATED = 'add_ons_updated'
    PROMO_CODE_CREATED = 'promo_code_created'
    PROMO_CODE_UPDATED = 'promo_code_updated'
    PROMO_CODE_DELETED = 'promo_code_deleted'
    PROMO_CODE_REDEEMED = 'promo_code_redeemed'
    REFERRAL_CREDIT_CONSUMED = 'referral_credit_consumed'
    GUEST_BOOKINGS_MIGRATED = 'guest_bookings_migrated'
