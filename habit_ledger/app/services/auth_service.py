"""
Authentication of the configured owner account.

The ledger has a single owner account configured through settings.
``AuthService.login`` checks a username/password pair against it and
issues a bearer token whose subject is the owner identity.
"""

from __future__ import annotations

import hmac
import logging

from habit_ledger.app.core.config import settings
from habit_ledger.app.core.errors import AuthError
from habit_ledger.app.core.security import create_access_token, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for verifying owner credentials."""

    @classmethod
    def authenticate(cls, username: str, password: str) -> bool:
        """Return ``True`` if the credentials match the owner account."""
        if not hmac.compare_digest(username.encode("utf-8"), settings.owner_username.encode("utf-8")):
            return False
        if settings.owner_password_hash:
            return verify_password(password, settings.owner_password_hash)
        return hmac.compare_digest(password.encode("utf-8"), settings.owner_password.encode("utf-8"))

    @classmethod
    async def login(cls, username: str, password: str) -> str:
        """Return an access token for valid credentials or raise ``AuthError``."""
        if not cls.authenticate(username, password):
            logger.warning("Failed login attempt for %s", username)
            raise AuthError("Invalid credentials")
        logger.info("Issued access token for %s", username)
        return create_access_token({"sub": username})
