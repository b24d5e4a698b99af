"""
Pydantic 2 common models for the gateway.

Provides shared response models for collection endpoints and error bodies.
"""

# flake8: noqa: E501


from typing import Any, Optional

from pydantic import Field, field_validator

from .base import ImmutableModel


class CollectionResponse(ImmutableModel):
    """
    Collection page reporting the exact total.

    Fields:
        hasNext: Whether another page exists after this one
        total: Total number of items across all pages
        items: Rows on the current page
    """

    has_next: bool = Field(alias="hasNext")
    total: int = Field(ge=0)
    items: list[dict[str, Any]] = Field(default_factory=list)


class BrowseResponse(ImmutableModel):
    """
    Browse page reporting how many records follow the current page.

    Fields:
        hasNext: Whether another page exists after this one
        remainingRecords: Count of items strictly after this page
        items: Rows on the current page
    """

    has_next: bool = Field(alias="hasNext")
    remaining_records: int = Field(ge=0, alias="remainingRecords")
    items: list[dict[str, Any]] = Field(default_factory=list)


class ErrorResponse(ImmutableModel):
    """
    Immutable error response model.

    Fields:
        code: Machine-readable error code (e.g., 'ALIAS_NOT_FOUND')
        message: Human-readable error message
        detailedMessage: Extra diagnostic text, defaults to the message

    Example:
        >>> error = ErrorResponse(
        ...     code="ALIAS_NOT_FOUND",
        ...     message="Alias not found: Z99",
        ... )
    """

    code: str = Field(max_length=255)
    message: str
    detailed_message: Optional[str] = Field(None, alias="detailedMessage")

    @field_validator("code")
    @classmethod
    def code_not_empty(cls, v: str) -> str:
        """Ensure error code is not just whitespace."""
        if v.strip() == "":
            raise ValueError("code cannot be empty or whitespace-only")
        return v.strip()

    def to_body(self) -> dict:
        """Serialize with wire aliases, detailedMessage falling back to message."""
        body = self.model_dump(by_alias=True)
        if not body.get("detailedMessage"):
            body["detailedMessage"] = self.message
        return body


__all__ = [
    "CollectionResponse",
    "BrowseResponse",
    "ErrorResponse",
]
