"""
Accredited investor applications.

An approved application carries a one-time approval token that lets the
applicant create a portal account. Only the SHA-256 digest of the token is
stored.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.user import utcnow


class ApplicationStatus(str, PyEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


def hash_approval_token(token: str) -> str:
    # SHA-256 is fine for random tokens, not for passwords
    return hashlib.sha256(token.encode()).hexdigest()


class InvestorApplication(Base):
    __tablename__ = "investor_applications"

    id: Mapped[int] = mapped_column(primary_key=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    accreditation_status: Mapped[str] = mapped_column(String(100), nullable=False)
    additional_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ApplicationStatus.PENDING,
        index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Approval token (hashed)
    approval_token_hash: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    approval_token_expires: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    approval_token_used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<InvestorApplication {self.email} {self.status.value}>"

    def issue_approval_token(self, ttl: timedelta) -> str:
        """
        Generate a new approval token.
        Returns the raw token (only shown once).
        Stores the hashed version.
        """
        raw_token = secrets.token_urlsafe(32)
        self.approval_token_hash = hash_approval_token(raw_token)
        self.approval_token_expires = datetime.now(timezone.utc) + ttl
        self.approval_token_used_at = None
        return raw_token

    def verify_approval_token(self, token: str) -> bool:
        """True if ``token`` is this application's live, unused approval token."""
        if self.status != ApplicationStatus.APPROVED:
            return False
        if not self.approval_token_hash or not self.approval_token_expires:
            return False
        if self.approval_token_used_at is not None:
            return False

        expires = self.approval_token_expires
        if expires.tzinfo is None:
            # SQLite drops the offset on the way back
            expires = expires.replace(tzinfo=timezone.utc)
        if datetime.now(timezone.utc) >= expires:
            return False

        return secrets.compare_digest(hash_approval_token(token), self.approval_token_hash)
