"""JWT authentication provider implementation.

Token payload structure:
    {
        "sub": "jdoe",
        "org": "mh_default_org",
        "name": "John Doe",
        "email": "jdoe@example.com",
        "roles": ["ROLE_ADMIN"],
        "exp": 1234567890
    }

Only ``sub`` is required; ``org`` falls back to the configured default
organization.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()


class JWTAuthProvider:
    """JWT-based authentication provider using a shared secret."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        default_organization: str = settings.default_organization,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._default_organization = default_organization

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract user info.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.info("token_rejected", reason=str(e))
            return None

        username = payload.get("sub")
        if not username:
            return None

        roles = payload.get("roles") or []
        if isinstance(roles, str):
            roles = [r.strip() for r in roles.split(",") if r.strip()]

        return TokenUser(
            username=username,
            organization=payload.get("org") or self._default_organization,
            name=payload.get("name"),
            email=payload.get("email"),
            roles=list(roles),
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.username,
            "org": user.organization,
            "name": user.name,
            "email": user.email,
            "roles": user.roles,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
