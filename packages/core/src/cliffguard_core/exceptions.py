"""Custom exceptions for the CliffGuard engine.

This module provides a hierarchy of exception classes for consistent error
handling across the tax, benefit, cliff and radar components. All exceptions
inherit from CliffGuardError, making it easy to catch all engine errors at
the request/response boundary.

Example:
    try:
        result = evaluate_tax(household)
    except UnsupportedYearError as e:
        # Ask the caller to pick a supported tax year
        return {"error": e.message, "supported": e.supported_years}
    except CliffGuardError as e:
        logger.error("evaluation_failed", error=str(e))
"""

from typing import Any, Optional, Sequence


class CliffGuardError(Exception):
    """Base exception for all CliffGuard errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise CliffGuardError("Something went wrong", details={"code": 500})
        CliffGuardError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize CliffGuardError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or a corrected request. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class InvalidInputError(CliffGuardError):
    """Error raised when household fields are malformed or out of range.

    Raised before any computation starts; no partial result is produced.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise InvalidInputError(
        ...     "Wages cannot be negative",
        ...     field="wages",
        ...     value=-100,
        ...     constraint=">= 0",
        ... )
        InvalidInputError: Wages cannot be negative
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize InvalidInputError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by correcting the
                request. Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class UnsupportedYearError(CliffGuardError):
    """Error raised when no parameter tables exist for a tax/program year.

    Attributes:
        year: The requested year.
        supported_years: Years for which tables are registered.
        table: Which table family was missing (e.g. "federal_tax").
    """

    def __init__(
        self,
        message: str,
        *,
        year: Optional[int] = None,
        supported_years: Sequence[int] = (),
        table: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=True)
        self.year = year
        self.supported_years = list(supported_years)
        self.table = table

        if year is not None:
            self.details["year"] = year
        if self.supported_years:
            self.details["supported_years"] = self.supported_years
        if table:
            self.details["table"] = table


class UnsupportedStateError(CliffGuardError):
    """Error raised when no state program tables exist for a state code.

    Attributes:
        state_code: The requested state.
        supported_states: States for which tables are registered.
    """

    def __init__(
        self,
        message: str,
        *,
        state_code: Optional[str] = None,
        supported_states: Sequence[str] = (),
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=True)
        self.state_code = state_code
        self.supported_states = sorted(supported_states)

        if state_code:
            self.details["state_code"] = state_code
        if self.supported_states:
            self.details["supported_states"] = self.supported_states


class ComputationTimeoutError(CliffGuardError):
    """Error raised when an evaluation exceeds its time bound.

    Any existing radar snapshot is left untouched.

    Attributes:
        timeout_seconds: The bound that was exceeded.
        session_id: Radar session, when raised by the radar service.
    """

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: Optional[float] = None,
        session_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=True)
        self.timeout_seconds = timeout_seconds
        self.session_id = session_id

        if timeout_seconds is not None:
            self.details["timeout_seconds"] = timeout_seconds
        if session_id:
            self.details["session_id"] = session_id


class StaleRequestError(CliffGuardError):
    """Raised internally when a newer submission supersedes a pending one.

    Never surfaced to callers of the boundary operations: the radar converts
    it into an empty response.

    Attributes:
        key: The session or task key.
        sequence: The superseded sequence number, if one had been issued.
    """

    def __init__(
        self,
        message: str = "Request superseded by a newer submission",
        *,
        key: Optional[str] = None,
        sequence: Optional[int] = None,
    ) -> None:
        super().__init__(message, recoverable=True)
        self.key = key
        self.sequence = sequence

        if key:
            self.details["key"] = key
        if sequence is not None:
            self.details["sequence"] = sequence


class ExternalServiceError(CliffGuardError):
    """Error raised when an external calculation service fails.

    Attributes:
        service: Name of the external service.
        status_code: HTTP status code, when the service answered.
    """

    def __init__(
        self,
        message: str,
        *,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.service = service
        self.status_code = status_code

        if service:
            self.details["service"] = service
        if status_code is not None:
            self.details["status_code"] = status_code


class ConfigurationError(CliffGuardError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "CliffGuardError",
    "InvalidInputError",
    "UnsupportedYearError",
    "UnsupportedStateError",
    "ComputationTimeoutError",
    "StaleRequestError",
    "ExternalServiceError",
    "ConfigurationError",
]
