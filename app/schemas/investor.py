"""
Investor application schemas.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel


class ApplicationCreate(CamelModel):
    """Accredited investor application form."""

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    company: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    accreditation_status: Optional[str] = Field(default=None, max_length=100)
    additional_info: Optional[str] = Field(default=None, max_length=5000)


class ApplicationCreated(CamelModel):
    message: str
    application_id: int


class ApplicationStatusResponse(CamelModel):
    application_id: int
    status: str
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None


class ApplicationResponse(CamelModel):
    """Full application as seen by administrators."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    company: Optional[str] = None
    city: str
    state: str
    accreditation_status: str
    additional_info: Optional[str] = None
    status: str
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def enum_value(cls, v: Any) -> Any:
        return getattr(v, "value", v)


class ReviewDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class ReviewRequest(CamelModel):
    decision: ReviewDecision


class ReviewResponse(CamelModel):
    application_id: int
    status: str
    approval_token: Optional[str] = Field(
        default=None,
        description="One-time registration token (only shown once!)",
    )
    expires_at: Optional[datetime] = None
