"""
Administration endpoints.

Requires the admin role for every route.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import Identity, require_role
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import ConflictError, NotFoundError
from app.models.application import ApplicationStatus
from app.models.user import UserRole
from app.repositories.application_repository import ApplicationRepository
from app.schemas.common import PaginatedResponse
from app.schemas.investor import (
    ApplicationResponse,
    ReviewDecision,
    ReviewRequest,
    ReviewResponse,
)

logger = logging.getLogger(__name__)

require_admin = require_role(UserRole.ADMIN)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/applications", response_model=PaginatedResponse[ApplicationResponse])
async def list_applications(
    status: Optional[ApplicationStatus] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List investor applications, newest first."""
    items, total = await ApplicationRepository(db).list(
        status=status,
        offset=(page - 1) * per_page,
        limit=per_page,
    )
    return PaginatedResponse.create(
        items=[ApplicationResponse.model_validate(a) for a in items],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.post("/applications/{application_id}/review", response_model=ReviewResponse)
async def review_application(
    application_id: int,
    data: ReviewRequest,
    identity: Identity = Depends(require_admin),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
):
    """
    Approve or reject a pending application.

    ⚠️ On approval the registration token is only shown once! Deliver it to
    the applicant out of band.
    """
    applications = ApplicationRepository(db)
    application = await applications.find_by_id(application_id)
    if application is None:
        raise NotFoundError("No application found with this ID", error="Application not found")
    if application.status != ApplicationStatus.PENDING:
        raise ConflictError(
            f"Application has already been {application.status.value}",
            error="Application reviewed",
        )

    approve = data.decision == ReviewDecision.APPROVE
    token = await applications.review(
        application,
        approve=approve,
        reviewer_id=identity.user_id,
        token_ttl=settings.approval_token_ttl,
    )
    logger.info(
        "Application %s %s by user %s",
        application.id, application.status.value, identity.user_id,
    )

    return ReviewResponse(
        application_id=application.id,
        status=application.status.value,
        approval_token=token,
        expires_at=application.approval_token_expires if approve else None,
    )
