"""
Credential store.

All lookups and writes normalise email to lower case. Every write is its own
transaction: one row, one commit.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyExistsError
from app.models.user import User, UserRole, UserStatus

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone", "company", "city", "state")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ── read operations ──────────────────────────────────────

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    # ── write operations ─────────────────────────────────────

    async def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.INVESTOR,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> User:
        """Insert a user. Raises AlreadyExistsError if the email is taken."""
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=role,
            status=status,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            await self.session.rollback()
            raise AlreadyExistsError()
        await self.session.refresh(user)
        return user

    async def update_last_login(self, user_id: int) -> None:
        await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(last_login=datetime.now(timezone.utc))
        )
        await self.session.commit()

    async def update_password_hash(self, user_id: int, password_hash: str) -> None:
        await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
        )
        await self.session.commit()

    async def update_profile(self, user_id: int, fields: dict[str, Any]) -> Optional[User]:
        """
        Apply a partial profile update. Keys outside PROFILE_FIELDS and
        ``None`` values are ignored. Returns the refreshed user, or None.
        """
        values = {k: v for k, v in fields.items() if k in PROFILE_FIELDS and v is not None}
        user = await self.find_by_id(user_id)
        if user is None:
            return None
        if values:
            values["updated_at"] = datetime.now(timezone.utc)
            await self.session.execute(update(User).where(User.id == user_id).values(**values))
            await self.session.commit()
            await self.session.refresh(user)
        return user
