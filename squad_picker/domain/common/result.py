"""Result types for caller-facing outcomes without exception control flow."""

from enum import Enum
from typing import Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorType(str, Enum):
    """Standard error types for consistent handling across callers."""

    INFEASIBLE = "infeasible"
    CALCULATION_ERROR = "calculation_error"


class DomainError(BaseModel):
    """Structured error information for callers."""

    error_type: ErrorType = Field(..., description="Standardized error type")
    message: str = Field(..., min_length=1, description="Human-readable error message")
    details: Optional[Dict] = Field(None, description="Additional error context")
    error_code: Optional[str] = Field(
        None, description="Specific error code for handling"
    )

    @classmethod
    def infeasible(
        cls,
        message: str,
        details: Optional[Dict] = None,
        error_code: Optional[str] = None,
    ) -> "DomainError":
        """Create an infeasibility error (no team fits the constraints)."""
        return cls(
            error_type=ErrorType.INFEASIBLE,
            message=message,
            details=details,
            error_code=error_code,
        )

    @classmethod
    def calculation_error(
        cls, message: str, details: Optional[Dict] = None
    ) -> "DomainError":
        """Create a calculation error."""
        return cls(
            error_type=ErrorType.CALCULATION_ERROR, message=message, details=details
        )


class Result(Generic[T]):
    """
    Result type for caller-facing outcomes.

    Allows solver operations to return either success values or structured errors
    (such as "no feasible team") without throwing exceptions callers must catch.
    """

    def __init__(
        self,
        value: Optional[T] = None,
        error: Optional[DomainError] = None,
        _allow_none: bool = False,
    ):
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if not _allow_none and value is None and error is None:
            raise ValueError("Result must have either value or error")

        self._value = value
        self._error = error

    @property
    def value(self) -> T:
        """Get the success value. Raises error if result is failure."""
        if self._error is not None:
            raise ValueError(
                f"Cannot access value on failed result: {self._error.message}"
            )
        return self._value

    @property
    def error(self) -> DomainError:
        """Get the error. Raises error if result is success."""
        if self._error is None:
            raise ValueError("Cannot access error on successful result")
        return self._error

    @property
    def is_success(self) -> bool:
        """Check if result represents success."""
        return self._error is None

    @property
    def is_failure(self) -> bool:
        """Check if result represents failure."""
        return self._error is not None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        """Create a successful result."""
        return cls(value=value, _allow_none=True)

    @classmethod
    def failure(cls, error: DomainError) -> "Result[T]":
        """Create a failed result."""
        return cls(error=error)
