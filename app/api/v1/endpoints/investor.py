"""
Accredited investor application endpoints (public).
"""

import logging
import re

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_client_ip
from app.core.database import get_db
from app.core.errors import MissingFieldsError, NotFoundError, ValidationError
from app.repositories.application_repository import ApplicationExistsError, ApplicationRepository
from app.schemas.investor import ApplicationCreate, ApplicationCreated, ApplicationStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "city",
    "state",
    "accreditation_status",
)


@router.post("/apply", response_model=ApplicationCreated, status_code=status.HTTP_201_CREATED)
async def apply(
    request: Request,
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Submit an accredited investor application for review."""
    fields = data.model_dump()
    if any(not (fields.get(name) or "").strip() for name in REQUIRED_FIELDS):
        raise MissingFieldsError("Please fill in all required fields")

    if not EMAIL_RE.match(data.email.strip()):
        raise ValidationError("Please provide a valid email address", error="Invalid email")

    applications = ApplicationRepository(db)
    if await applications.find_by_email(data.email) is not None:
        raise ApplicationExistsError()

    application = await applications.create(
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=data.email,
        phone=data.phone.strip(),
        company=(data.company or "").strip() or None,
        city=data.city.strip(),
        state=data.state.strip(),
        accreditation_status=data.accreditation_status.strip(),
        additional_info=(data.additional_info or "").strip() or None,
    )

    logger.info("Investor application %s submitted from %s", application.id, get_client_ip(request))
    return ApplicationCreated(
        message="Application submitted successfully",
        application_id=application.id,
    )


@router.get("/status/{application_id}", response_model=ApplicationStatusResponse)
async def application_status(
    application_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Check the review status of an application."""
    application = await ApplicationRepository(db).find_by_id(application_id)
    if application is None:
        raise NotFoundError("No application found with this ID", error="Application not found")

    return ApplicationStatusResponse(
        application_id=application.id,
        status=application.status.value,
        submitted_at=application.submitted_at,
        reviewed_at=application.reviewed_at,
    )
