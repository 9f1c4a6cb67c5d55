"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.booking.app.command import (
    apply_referral_code_use_case,
    consume_referral_credit_use_case,
    create_booking_use_case,
    edit_booking_use_case,
    get_or_create_referral_credit_use_case,
    guest_session_use_case,
    manage_closed_slots_use_case,
    manage_promo_code_use_case,
    manage_staff_shift_use_case,
    migrate_guest_bookings_use_case,
    redeem_promo_code_use_case,
    update_add_on_config_use_case,
    update_booking_status_use_case,
)
from src.service.booking.app.query import (
    check_duplicate_booking_use_case,
    compute_price_use_case,
    get_available_slots_use_case,
    get_booking_use_case,
    get_closed_slots_use_case,
    get_pricing_config_use_case,
    get_staffing_signals_use_case,
    list_bookings_use_case,
    validate_promo_code_use_case,
)
from src.service.booking.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    # Commands
    create_booking_use_case,
    update_booking_status_use_case,
    edit_booking_use_case,
    redeem_promo_code_use_case,
    consume_referral_credit_use_case,
    manage_closed_slots_use_case,
    manage_promo_code_use_case,
    update_add_on_config_use_case,
    get_or_create_referral_credit_use_case,
    apply_referral_code_use_case,
    guest_session_use_case,
    migrate_guest_bookings_use_case,
    manage_staff_shift_use_case,
    # Queries
    get_available_slots_use_case,
    get_closed_slots_use_case,
    compute_price_use_case,
    get_pricing_config_use_case,
    validate_promo_code_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    check_duplicate_booking_use_case,
    get_staffing_signals_use_case,
    # Auth
    role_auth,
]
