"""
Security Utilities.

Password hashing and JWT access tokens.
"""

from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from notes_app.backend.core.config_schema import JwtSchema
from notes_app.backend.core.exceptions import AuthenticationError
from notes_app.backend.core.logging import get_logger
from notes_app.backend.core.utils import utc_now

logger = get_logger(__name__)

BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; newer releases reject longer input.
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = _password_bytes(password)
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        _password_bytes(plain_password),
        hashed_password.encode("utf-8"),
    )


class TokenManager:
    """
    Issues and verifies JWT access tokens.

    Built once at startup from the JWT secret and security.yaml, then
    shared by the auth service and the bearer-token dependency.
    """

    def __init__(self, secret: str, jwt_config: JwtSchema) -> None:
        self._secret = secret
        self._config = jwt_config

    def create_access_token(
        self,
        data: dict[str, Any],
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create a JWT access token.

        Args:
            data: Payload data to encode
            expires_delta: Optional custom expiration time

        Returns:
            Encoded JWT token
        """
        to_encode = data.copy()

        if expires_delta:
            expire = utc_now() + expires_delta
        else:
            expire = utc_now() + timedelta(minutes=self._config.access_token_expire_minutes)

        to_encode.update({"exp": expire, "type": "access", "aud": self._config.audience})
        return jwt.encode(to_encode, self._secret, algorithm=self._config.algorithm)

    def decode_token(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a JWT token.

        Raises:
            AuthenticationError: If token is invalid or expired
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._config.algorithm],
                audience=self._config.audience,
            )
        except JWTError as e:
            logger.warning("Token decode failed", extra={"error": str(e)})
            raise AuthenticationError("Invalid or expired token")

        if payload.get("type") != "access":
            raise AuthenticationError("Invalid or expired token")
        return payload

    def resolve_user_id(self, token: str) -> int:
        """Return the user id carried in a valid access token."""
        payload = self.decode_token(token)
        subject = payload.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            raise AuthenticationError("Invalid or expired token")
        if user_id <= 0:
            raise AuthenticationError("Invalid or expired token")
        return user_id
