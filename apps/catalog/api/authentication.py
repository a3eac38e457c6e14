"""
Bearer token authentication for the back-office API.

Tokens are issued by the admin auth service and signed with the shared
JWT_SECRET. This service only verifies them; it never issues tokens.
"""

import logging
from dataclasses import dataclass

from django.conf import settings
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from rest_framework import authentication, exceptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminActor:
    """Authenticated caller. Admin accounts live in the auth service, not in this database."""
    admin_id: str
    role: str = ''
    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self):
        return self.admin_id

    def __str__(self):
        return f"admin:{self.admin_id}"


class JWTBearerAuthentication(authentication.BaseAuthentication):
    keyword = 'Bearer'

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed('Invalid authorization header.')

        try:
            token = header[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid token.')

        claims = self.decode(token)
        admin_id = claims.get('adminId', claims.get('sub'))
        if admin_id in (None, ''):
            raise exceptions.AuthenticationFailed('Token carries no admin identity.')

        actor = AdminActor(admin_id=str(admin_id), role=claims.get('adminRoleName') or '')
        return actor, claims

    def decode(self, token):
        try:
            return jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                options={'verify_aud': False},
            )
        except ExpiredSignatureError as exc:
            raise exceptions.AuthenticationFailed('Token expired.') from exc
        except JWTError as exc:
            logger.warning("Token verification failed: %s", exc)
            raise exceptions.AuthenticationFailed('Invalid token.') from exc

    def authenticate_header(self, request):
        return self.keyword
