"""Investor application store."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError
from app.models.application import ApplicationStatus, InvestorApplication
from app.repositories.user_repository import normalize_email


class ApplicationExistsError(ConflictError):
    error = "Application exists"
    message = "An application with this email already exists"


class ApplicationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, application_id: int) -> Optional[InvestorApplication]:
        return await self.session.get(InvestorApplication, application_id)

    async def find_by_email(self, email: str) -> Optional[InvestorApplication]:
        result = await self.session.execute(
            select(InvestorApplication).where(InvestorApplication.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        status: Optional[ApplicationStatus] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[InvestorApplication], int]:
        """Return one page of applications (newest first) and the total count."""
        query = select(InvestorApplication)
        count_query = select(func.count(InvestorApplication.id))
        if status:
            query = query.where(InvestorApplication.status == status)
            count_query = count_query.where(InvestorApplication.status == status)

        total = (await self.session.execute(count_query)).scalar() or 0
        result = await self.session.execute(
            query.order_by(InvestorApplication.submitted_at.desc(), InvestorApplication.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all(), total

    async def create(self, **fields) -> InvestorApplication:
        fields["email"] = normalize_email(fields["email"])
        application = InvestorApplication(status=ApplicationStatus.PENDING, **fields)
        self.session.add(application)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ApplicationExistsError()
        await self.session.refresh(application)
        return application

    async def review(
        self,
        application: InvestorApplication,
        approve: bool,
        reviewer_id: int,
        token_ttl: timedelta,
    ) -> Optional[str]:
        """
        Record the decision. Returns the raw approval token when approved.
        """
        application.status = ApplicationStatus.APPROVED if approve else ApplicationStatus.REJECTED
        application.reviewed_at = datetime.now(timezone.utc)
        application.reviewed_by = reviewer_id

        raw_token = application.issue_approval_token(token_ttl) if approve else None

        await self.session.commit()
        await self.session.refresh(application)
        return raw_token

    async def mark_token_used(self, application: InvestorApplication) -> None:
        application.approval_token_used_at = datetime.now(timezone.utc)
        await self.session.commit()
