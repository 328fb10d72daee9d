"""
Authentication service.

Orchestrates registration, login, token verification and password change on
top of the credential store, the password manager and the token service.
Failures raise ``app.core.errors`` exceptions and leave the store untouched;
the only writes are on the success paths (user creation, last_login,
password hash).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from app.auth.jwt import ExpiredToken, InvalidToken, TokenClaims, TokenService, ValidToken
from app.auth.password import PasswordManager, is_strong_enough
from app.core.errors import (
    AccountInactiveError,
    AlreadyExistsError,
    InvalidApprovalTokenError,
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidTokenError,
    MissingCredentialsError,
    MissingFieldsError,
    TokenExpiredError,
    UserNotFoundError,
    WeakPasswordError,
)
from app.models.user import User, UserRole, UserStatus
from app.repositories.application_repository import ApplicationRepository
from app.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """A freshly issued session token and the user it was issued for."""
    token: str
    user: User


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        passwords: PasswordManager,
        tokens: TokenService,
        applications: Optional[ApplicationRepository] = None,
        require_approval_token: bool = True,
    ):
        self.users = users
        self.passwords = passwords
        self.tokens = tokens
        self.applications = applications
        self.require_approval_token = require_approval_token

    def _issue(self, user: User) -> str:
        return self.tokens.issue(user_id=user.id, email=user.email, role=user.role.value)

    def decode(self, token: Optional[str]) -> TokenClaims:
        """Verify ``token`` and return its claims, or raise the matching error."""
        if _blank(token):
            raise InvalidTokenError()

        result = self.tokens.verify(token)
        if isinstance(result, ValidToken):
            return result.claims
        if isinstance(result, ExpiredToken):
            raise TokenExpiredError()
        if isinstance(result, InvalidToken):
            logger.debug("Token rejected: %s", result.reason)
        raise InvalidTokenError()

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
        approval_token: Optional[str],
    ) -> AuthResult:
        """
        Create an investor account and sign it in.

        Raises:
            MissingFieldsError: a required field is blank
            WeakPasswordError: password shorter than the minimum
            AlreadyExistsError: email is taken (case-insensitive)
            InvalidApprovalTokenError: no approved application matches
        """
        if any(_blank(v) for v in (email, password, first_name, last_name, approval_token)):
            raise MissingFieldsError(
                "Email, password, first name, last name, and approval token are required"
            )
        if not is_strong_enough(password):
            raise WeakPasswordError()

        if await self.users.find_by_email(email) is not None:
            raise AlreadyExistsError()

        application = None
        if self.require_approval_token:
            if self.applications is not None:
                application = await self.applications.find_by_email(email)
            if application is None or not application.verify_approval_token(approval_token):
                logger.warning("Registration rejected for %s: invalid approval token", email)
                raise InvalidApprovalTokenError()

        user = await self.users.create(
            email=email,
            password_hash=self.passwords.hash(password),
            first_name=first_name,
            last_name=last_name,
            role=UserRole.INVESTOR,
            status=UserStatus.ACTIVE,
        )
        if application is not None:
            await self.applications.mark_token_used(application)

        logger.info("Registered user %s", user.id)
        return AuthResult(token=self._issue(user), user=user)

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Authenticate with email and password.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        Account status is only disclosed once the password has been verified.
        """
        if _blank(email) or _blank(password):
            raise MissingCredentialsError()

        user = await self.users.find_by_email(email)
        if user is None:
            self.passwords.dummy_verify(password)
            logger.info("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not self.passwords.verify(password, user.password_hash):
            logger.info("Login failed: bad password for user %s", user.id)
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.info("Login refused: user %s is %s", user.id, user.status.value)
            raise AccountInactiveError()

        # Check if password needs rehash (security parameter upgrade)
        if self.passwords.needs_rehash(user.password_hash):
            await self.users.update_password_hash(user.id, self.passwords.hash(password))

        await self.users.update_last_login(user.id)
        logger.info("User %s logged in", user.id)
        return AuthResult(token=self._issue(user), user=user)

    async def verify_token(self, token: Optional[str]) -> User:
        """
        Validate ``token`` against live account state.

        Unlike the request middleware this re-reads the user, so a
        deactivated account is rejected even with an unexpired token.
        Any token that fails verification, expired ones included, is an
        InvalidTokenError here.
        """
        try:
            claims = self.decode(token)
        except TokenExpiredError:
            raise InvalidTokenError("Token has expired")

        user = await self.users.find_by_id(claims.user_id)
        if user is None:
            raise InvalidTokenError("User not found")
        if not user.is_active:
            raise AccountInactiveError("Your account is not active")
        return user

    async def change_password(
        self,
        token: Optional[str],
        current_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        if any(_blank(v) for v in (token, current_password, new_password)):
            raise MissingFieldsError("Current password and new password are required")
        if not is_strong_enough(new_password):
            raise WeakPasswordError()

        claims = self.decode(token)

        user = await self.users.find_by_id(claims.user_id)
        if user is None:
            raise UserNotFoundError()

        if not self.passwords.verify(current_password, user.password_hash):
            logger.info("Password change refused for user %s: bad current password", user.id)
            raise InvalidPasswordError()

        await self.users.update_password_hash(user.id, self.passwords.hash(new_password))
        logger.info("Password changed for user %s", user.id)
