"""
Standard API response envelope.
"""

from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope returned by write endpoints.

    Either success with data, or failure with a field -> messages mapping.
    """

    success: bool = Field(description="Whether the operation succeeded")
    message: Optional[str] = Field(None, description="Human-readable summary")
    data: Optional[T] = Field(None, description="Operation result")
    errors: Optional[Dict[str, List[str]]] = Field(None, description="Validation messages by field")

    @classmethod
    def ok(cls, data: T, message: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, errors: Dict[str, List[str]], message: Optional[str] = None) -> "ApiResponse[T]":
        return cls(success=False, errors=errors, message=message)
