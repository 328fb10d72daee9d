"""
Member portal endpoints.

Every route here sits behind the token check (router-level dependency) and
reads the caller from the ``Identity`` it produced.
"""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import Identity, get_current_identity
from app.core.database import get_db
from app.core.errors import NotFoundError, UserNotFoundError
from app.models.deal import Deal, DealStatus, Report, ReportStatus
from app.repositories.user_repository import UserRepository
from app.schemas.portal import (
    Dashboard,
    DashboardResponse,
    DealDetail,
    DealListResponse,
    DealResponse,
    DealSummary,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    ReportItem,
    ReportListResponse,
    profile_from_user,
)

router = APIRouter(dependencies=[Depends(get_current_identity)])

REPORT_LIMIT = 50
RECENT_REPORT_WINDOW = timedelta(days=30)


@router.get("/deals", response_model=DealListResponse)
async def list_deals(db: AsyncSession = Depends(get_db)):
    """Current investment opportunities, newest launch first."""
    result = await db.execute(
        select(Deal)
        .where(Deal.status == DealStatus.ACTIVE)
        .order_by(Deal.launch_date.desc(), Deal.id.desc())
    )
    deals = result.scalars().all()
    return DealListResponse(deals=[DealSummary.model_validate(d) for d in deals])


@router.get("/deals/{deal_id}", response_model=DealResponse)
async def get_deal(deal_id: int, db: AsyncSession = Depends(get_db)):
    """Full details of a single deal."""
    deal = await db.get(Deal, deal_id)
    if deal is None:
        raise NotFoundError("Investment opportunity not found", error="Deal not found")
    return DealResponse(deal=DealDetail.model_validate(deal))


@router.get("/reports", response_model=ReportListResponse)
async def list_reports(db: AsyncSession = Depends(get_db)):
    """Published reports and updates."""
    result = await db.execute(
        select(Report)
        .where(Report.status == ReportStatus.PUBLISHED)
        .order_by(Report.published_at.desc(), Report.id.desc())
        .limit(REPORT_LIMIT)
    )
    reports = result.scalars().all()
    return ReportListResponse(reports=[ReportItem.model_validate(r) for r in reports])


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    user = await UserRepository(db).find_by_id(identity.user_id)
    if user is None:
        raise UserNotFoundError("User profile not found")
    return ProfileResponse(profile=profile_from_user(user))


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    data: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Update the caller's profile. Fields left out are unchanged."""
    user = await UserRepository(db).update_profile(
        identity.user_id,
        data.model_dump(exclude_unset=True),
    )
    if user is None:
        raise UserNotFoundError("Unable to update profile")
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        profile=profile_from_user(user),
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Overview numbers for the portal landing page."""
    active_deals = await db.scalar(
        select(func.count(Deal.id)).where(Deal.status == DealStatus.ACTIVE)
    )
    since = datetime.now(timezone.utc) - RECENT_REPORT_WINDOW
    recent_reports = await db.scalar(
        select(func.count(Report.id)).where(
            Report.status == ReportStatus.PUBLISHED,
            Report.published_at > since,
        )
    )

    user = await UserRepository(db).find_by_id(identity.user_id)
    if user is None:
        raise UserNotFoundError()

    return DashboardResponse(
        dashboard=Dashboard(
            active_deals=active_deals or 0,
            recent_reports=recent_reports or 0,
            member_since=user.created_at,
            last_login=user.last_login,
            user_name=user.full_name,
        )
    )
