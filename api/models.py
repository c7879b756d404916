"""
API models and schemas for the books service.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BookDocument(BaseModel):
    """Shape of the persisted JSON document. Unknown top-level keys are kept."""
    model_config = ConfigDict(extra="allow")

    books: List[Dict[str, Any]] = Field(..., description="Ordered books collection")


class BookPayload(BaseModel):
    """
    Request body for creating or updating a book.

    No fields are declared: every key supplied by the client is kept as-is
    and merged onto the stored record.
    """
    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"example": {"title": "Cien años de soledad", "author": "Gabriel García Márquez"}},
    )

    def supplied_fields(self) -> Dict[str, Any]:
        """Return the client-supplied fields."""
        return dict(self.model_extra or {})


class Book(BaseModel):
    """Book response model."""
    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Book identifier")


class MessageResponse(BaseModel):
    """Confirmation message response."""
    message: str = Field(..., description="Confirmation message")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[Any] = Field(None, description="Additional error details (debug only)")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    storage_status: str = Field(..., description="Backing file status")
    books_count: Optional[int] = Field(None, description="Number of stored books")
