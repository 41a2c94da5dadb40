"""
Error taxonomy for Vector Plus.

Every error raised on purpose by the tool derives from VectorPlusError so
the CLI can report it with a single handler.
"""

from typing import Any, Dict, List, Optional


class VectorPlusError(Exception):
    """
    Base class for all Vector Plus errors.

    Carries structured details for logging.
    """

    error_code: str = "VECTOR_PLUS_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for logging."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigNotFoundError(VectorPlusError):
    """Requested configuration file does not exist."""

    error_code = "CONFIG_NOT_FOUND"


class MalformedConfigError(VectorPlusError):
    """Document is not valid JSON or has missing/mistyped fields."""

    error_code = "MALFORMED_CONFIG"


class ValidationFailedError(VectorPlusError):
    """Validation produced one or more errors."""

    error_code = "VALIDATION_FAILED"

    def __init__(self, message: str, warnings: List[str], errors: List[str]):
        super().__init__(message, details={"warnings": list(warnings), "errors": list(errors)})
        self.warnings = list(warnings)
        self.errors = list(errors)


class PreconditionError(VectorPlusError):
    """Inputs violate a documented precondition."""

    error_code = "PRECONDITION_VIOLATION"
