"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.booking.driven_adapter.model.audit_log_model import AuditLogModel
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.model.closed_slot_config_model import (
    ClosedSlotConfigModel,
)
from src.service.booking.driven_adapter.model.pricing_config_model import PricingConfigModel
from src.service.booking.driven_adapter.model.promo_code_model import PromoCodeModel
from src.service.booking.driven_adapter.model.promo_redemption_model import (
    PromoRedemptionModel,
)
from src.service.booking.driven_adapter.model.referral_credit_model import ReferralCreditModel
from src.service.booking.driven_adapter.model.staff_shift_model import StaffShiftModel

__all__ = [
    'AuditLogModel',
    'BookingModel',
    'ClosedSlotConfigModel',
    'PricingConfigModel',
    'PromoCodeModel',
    'PromoRedemptionModel',
    'ReferralCreditModel',
    'StaffShiftModel',
]
