"""
Shared response schemas - pagination, errors etc
"""

from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar('T')


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaginationResponse(BaseModel, Generic[T]):
    """Pagination wrapper for API responses"""

    items: List[T]
    total: int
    page: int
    per_page: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        page: int,
        per_page: int
    ) -> "PaginationResponse[T]":
        # calculate page info
        pages = (total + per_page - 1) // per_page

        return cls(
            items=items,
            total=total,
            page=page,
            per_page=per_page,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1
        )


class FieldError(BaseModel):
    """A single violated field constraint."""

    field: str = Field(description="Dotted path of the offending field")
    message: str = Field(description="What is wrong with it")


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str = Field(description="Error type")
    message: str = Field(description="Human-readable error message")
    errors: Optional[List[FieldError]] = Field(default=None, description="Per-field violations")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "ValidationError",
                "message": "Validation error",
                "errors": [
                    {"field": "branch", "message": "Input should be 'cs', 'it', 'ee', ..."}
                ],
                "timestamp": "2025-09-13T17:23:45Z"
            }
        }
    )


class SuccessResponse(BaseModel):
    """Standard success response schema."""

    success: bool = Field(default=True, description="Operation success status")
    message: str = Field(description="Success message")
    data: Optional[dict[str, Any]] = Field(default=None, description="Additional response data")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Note deleted successfully",
                "data": {"id": "123e4567-e89b-12d3-a456-426614174000"}
            }
        }
    )


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(default_factory=_utcnow)
    version: str = Field(description="Application version")
    checks: dict[str, dict[str, Any]] = Field(description="Individual component health checks")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-09-13T10:30:00Z",
                "version": "1.0.0",
                "checks": {
                    "database": {"status": "healthy", "response_time_ms": 15},
                    "redis": {"status": "healthy", "response_time_ms": 5}
                }
            }
        }
    )
