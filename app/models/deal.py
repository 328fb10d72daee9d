"""
Investment opportunities and investor reports shown in the member portal.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Enum, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.user import utcnow


class DealStatus(str, PyEnum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


class ReportStatus(str, PyEnum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Deal(Base):
    """An investment opportunity offered to accredited investors."""

    __tablename__ = "deals"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Amounts in USD
    target_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    raised_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    minimum_investment: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)

    # Detail-only fields
    expected_return: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    investment_timeline: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    risk_level: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    details: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    status: Mapped[DealStatus] = mapped_column(
        Enum(DealStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DealStatus.DRAFT,
        index=True,
    )
    launch_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    close_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    images: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    documents: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<Deal {self.title}>"


class Report(Base):
    """Quarterly updates, market notes and similar member publications."""

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ReportStatus.DRAFT,
        index=True,
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def __repr__(self) -> str:
        return f"<Report {self.title}>"
