from pathlib import Path
from typing import Annotated, List

import orjson
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Car Wash Booking Engine'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'car_wash_booking'
    POSTGRES_PORT: int = 5432
    # Full URL override (e.g. sqlite+aiosqlite:///:memory: in tests)
    DATABASE_URL: str = ''

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    @property
    def DATABASE_URL_SYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Connection pool
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800
    DB_POOL_PRE_PING: bool = True

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ALGORITHM: str = 'HS256'

    # Guest sessions
    GUEST_SESSION_TTL_MINUTES: int = 60 * 24
    GUEST_SESSION_VALIDATION_TIMEOUT_SECONDS: float = 2.0

    # Business rules
    BUSINESS_TIMEZONE: str = 'Asia/Dubai'
    SUBSCRIPTION_DISCOUNT_RATE: float = 0.075
    SUBSCRIPTION_WASHES_PER_MONTH: int = 4
    MAX_REFERRALS_PER_USER: int = 50
    REFEREE_DISCOUNT_PERCENT: int = 15
    BOOKINGS_PER_STAFF: int = 3

    # Tracing (no endpoint: spans are created but not exported)
    OTEL_SERVICE_NAME: str = 'booking-engine'
    OTEL_EXPORTER_OTLP_ENDPOINT: str = ''
    OTEL_CONSOLE_EXPORT: bool = False

    # CORS
    # Comma separated or a JSON list; NoDecode leaves parsing to the validator below
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            if v.lstrip().startswith('['):
                return orjson.loads(v)
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        elif isinstance(v, list):
            return v
        return []


settings = Settings()  # type: ignore
