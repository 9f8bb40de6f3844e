"""
Auth Service.

Registration, credential checks and profile lookup. Issues access tokens
through the shared TokenManager.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notes_app.backend.core.config_schema import PasswordPolicySchema
from notes_app.backend.core.exceptions import AuthenticationError, ConflictError
from notes_app.backend.core.security import TokenManager, hash_password, verify_password
from notes_app.backend.models.user import User
from notes_app.backend.repositories.user import UserRepository
from notes_app.backend.services.base import BaseService

EMAIL_TAKEN = "Email already registered"
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService(BaseService):
    """Service for account registration and login."""

    def __init__(
        self,
        session: AsyncSession,
        token_manager: TokenManager,
        password_policy: PasswordPolicySchema,
    ) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)
        self._tokens = token_manager
        self._policy = password_policy

    def issue_token(self, user: User) -> str:
        """Create an access token whose subject is the user id."""
        return self._tokens.create_access_token({"sub": str(user.id), "email": user.email})

    async def register(self, email: str, password: str) -> tuple[User, str]:
        """
        Create an account and sign it in.

        Args:
            email: Normalized (trimmed, lowercased) email
            password: Plain-text password

        Returns:
            The new user and an access token

        Raises:
            ValidationError: If the password violates the length policy
            ConflictError: If the email is already registered
        """
        self._validate_string_length(
            password,
            "password",
            min_length=self._policy.min_length,
            max_length=self._policy.max_length,
        )

        if await self._execute_db_operation("check_email", self.repo.exists_by_email(email)):
            raise ConflictError(EMAIL_TAKEN)

        user = await self._execute_db_operation(
            "register_user",
            self.repo.create(email=email, password_hash=hash_password(password)),
            conflict_message=EMAIL_TAKEN,
        )
        self._log_operation("User registered", user_id=user.id)
        return user, self.issue_token(user)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """
        Verify credentials.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = await self._execute_db_operation("find_user", self.repo.get_by_email(email))
        if user is None or not verify_password(password, user.password_hash):
            self._logger.warning("Login failed", extra={"email": email})
            raise AuthenticationError(INVALID_CREDENTIALS)

        self._log_operation("User logged in", user_id=user.id)
        return user, self.issue_token(user)

    async def get_profile(self, user_id: int) -> User:
        """
        Load the acting user.

        Raises:
            NotFoundError: If the account no longer exists
        """
        user = await self._execute_db_operation("get_profile", self.repo.get_by_id_or_none(user_id))
        return self._require_found(user, "User not found")
