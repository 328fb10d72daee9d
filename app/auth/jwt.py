"""
Session token issuing and verification.

Tokens are HS256 JWTs signed with the server-held secret. Verification is a
pure function of the token, the secret and the clock, and returns a tagged
result instead of raising:

- ValidToken(claims)
- ExpiredToken()        signature fine, lifetime over
- InvalidToken(reason)  bad signature, wrong issuer, malformed, missing claims

Callers must keep Expired and Invalid apart; clients show a re-login prompt
for the first and a hard error for the second.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import JWTError, jwt
from pydantic import BaseModel

JWT_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(days=7)
REQUIRED_CLAIMS = ("sub", "email", "role", "iat", "exp")


class TokenClaims(BaseModel):
    """Identity carried by a session token."""
    user_id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime
    jti: Optional[str] = None


@dataclass(frozen=True)
class ValidToken:
    claims: TokenClaims


@dataclass(frozen=True)
class ExpiredToken:
    pass


@dataclass(frozen=True)
class InvalidToken:
    reason: str


TokenVerification = Union[ValidToken, ExpiredToken, InvalidToken]


class TokenService:
    """Creates and validates signed, time-limited session tokens."""

    def __init__(
        self,
        secret_key: str,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        algorithm: str = JWT_ALGORITHM,
        issuer: str = "endevera-api",
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self.ttl = ttl
        self.algorithm = algorithm
        self.issuer = issuer

    def issue(
        self,
        user_id: int,
        email: str,
        role: str,
        ttl: Optional[timedelta] = None,
    ) -> str:
        """
        Create a signed token for the given identity.

        Args:
            user_id: The user's database ID
            email: User's email address
            role: User's role for RBAC
            ttl: Lifetime override; zero or negative produces an already
                expired token

        Returns:
            Encoded JWT string
        """
        now = datetime.now(timezone.utc)
        lifetime = self.ttl if ttl is None else ttl
        issued_at = int(now.timestamp())
        expires_at = int((now + lifetime).timestamp())

        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "iat": issued_at,
            "exp": expires_at,
            "iss": self.issuer,
            "jti": secrets.token_urlsafe(16),  # Unique token ID
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenVerification:
        """Check signature, issuer and expiry of ``token``."""
        if not token:
            return InvalidToken("empty token")

        try:
            # Expiry is checked below, only after the signature has passed
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"verify_exp": False, "verify_aud": False},
            )
        except JWTError as e:
            return InvalidToken(str(e) or "invalid token")

        missing = [claim for claim in REQUIRED_CLAIMS if claim not in payload]
        if missing:
            return InvalidToken(f"missing claims: {', '.join(missing)}")

        try:
            user_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return InvalidToken("malformed claims")

        if datetime.now(timezone.utc) >= expires_at:
            return ExpiredToken()

        return ValidToken(
            TokenClaims(
                user_id=user_id,
                email=str(payload["email"]),
                role=str(payload["role"]),
                issued_at=issued_at,
                expires_at=expires_at,
                jti=payload.get("jti"),
            )
        )
