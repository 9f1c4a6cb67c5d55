"""
Access token handling for customers, staff and managers
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Union

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.booking.domain.enum.booking_enums import UserRole
from src.service.booking.domain.value_object.actor_context import CustomerActor, StaffActor


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_jwt_token(
        self,
        *,
        user_id: str,
        role: UserRole,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        name: Optional[str] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': user_id,
            'exp': now + timedelta(minutes=self.token_expire_minutes),
            'iat': now,
            'user_id': user_id,
            'role': role.value,
            'email': email,
            'phone': phone,
            'name': name,
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError('Token expired')
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def get_actor_from_jwt(self, token: Optional[str]) -> Union[CustomerActor, StaffActor]:
        if not token:
            raise AuthenticationError('Not authenticated')

        # Rebuild the actor from the JWT payload (no DB query)
        payload = self.decode_jwt_token(token)
        user_id = payload.get('user_id')
        try:
            role = UserRole(payload.get('role'))
        except ValueError:
            raise AuthenticationError('Invalid token')
        if not user_id:
            raise AuthenticationError('Invalid token')

        if role == UserRole.CUSTOMER:
            return CustomerActor(
                user_id=str(user_id), phone=payload.get('phone'), name=payload.get('name')
            )

        email = payload.get('email')
        if not email:
            raise AuthenticationError('Invalid token')
        return StaffActor(staff_id=str(user_id), email=email, role_name=role)
