from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from src.platform.config.core_setting import settings


Clock = Callable[[], datetime]


def business_now(timezone_name: str | None = None) -> datetime:
    """Current instant in the business time zone (availability is judged on its calendar)"""
    return datetime.now(ZoneInfo(timezone_name or settings.BUSINESS_TIMEZONE))
