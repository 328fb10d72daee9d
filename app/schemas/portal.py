"""
Member portal schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel


class DealSummary(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    target_amount: Optional[Decimal] = None
    raised_amount: Optional[Decimal] = None
    minimum_investment: Optional[Decimal] = None
    status: str
    launch_date: Optional[datetime] = None
    close_date: Optional[datetime] = None
    images: Optional[List[str]] = None
    documents: Optional[List[str]] = None
    created_at: datetime

    @field_validator("status", mode="before")
    @classmethod
    def enum_value(cls, v: Any) -> Any:
        return getattr(v, "value", v)


class DealDetail(DealSummary):
    expected_return: Optional[str] = None
    investment_timeline: Optional[str] = None
    risk_level: Optional[str] = None
    details: Optional[dict[str, Any]] = None


class DealListResponse(CamelModel):
    deals: List[DealSummary]


class DealResponse(CamelModel):
    deal: DealDetail


class ReportItem(CamelModel):
    id: int
    title: str
    type: Optional[str] = None
    content: Optional[str] = None
    file_url: Optional[str] = None
    published_at: Optional[datetime] = None
    created_at: datetime


class ReportListResponse(CamelModel):
    reports: List[ReportItem]


class Profile(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    phone: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    member_since: Optional[datetime] = None
    last_login: Optional[datetime] = None


class ProfileResponse(CamelModel):
    profile: Profile


class ProfileUpdateResponse(CamelModel):
    message: str
    profile: Profile


class ProfileUpdate(CamelModel):
    """Partial profile update; omitted or null fields are left unchanged."""

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    company: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)


class Dashboard(CamelModel):
    active_deals: int
    recent_reports: int
    member_since: Optional[datetime] = None
    last_login: Optional[datetime] = None
    user_name: str


class DashboardResponse(CamelModel):
    dashboard: Dashboard


def profile_from_user(user) -> Profile:
    return Profile(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role.value,
        phone=user.phone,
        company=user.company,
        city=user.city,
        state=user.state,
        member_since=user.created_at,
        last_login=user.last_login,
    )
