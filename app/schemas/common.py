"""
Common schemas used across the API.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginatedResponse(CamelModel, Generic[T]):
    """Generic paginated response wrapper."""

    items: List[T]
    total: int = Field(description="Total number of items matching filters")
    page: int = Field(description="Current page number")
    per_page: int = Field(description="Items per page")
    pages: int = Field(description="Total number of pages")

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        page: int,
        per_page: int,
    ) -> "PaginatedResponse[T]":
        """Factory method to create paginated response."""
        pages = (total + per_page - 1) // per_page if per_page > 0 else 0
        return cls(
            items=items,
            total=total,
            page=page,
            per_page=per_page,
            pages=pages,
        )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Error response format."""

    error: str = Field(description="Error category")
    message: str = Field(description="Human-readable error message")
    request_id: Optional[str] = Field(default=None, alias="requestId")
    detail: Optional[str] = Field(default=None, description="Exception detail (debug mode only)")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    timestamp: str
    environment: str
    version: str
    database: str = "connected"
