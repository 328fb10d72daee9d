"""
Endevera Database Models

This module exports all SQLAlchemy models for the application.
"""

from app.models.user import User, UserRole, UserStatus
from app.models.deal import Deal, DealStatus, Report, ReportStatus
from app.models.application import InvestorApplication, ApplicationStatus

__all__ = [
    # User models
    "User",
    "UserRole",
    "UserStatus",
    # Portal content
    "Deal",
    "DealStatus",
    "Report",
    "ReportStatus",
    # Onboarding
    "InvestorApplication",
    "ApplicationStatus",
]
