"""
Custom exception classes for the application.

Shelf capacity overflow is NOT an exception: it is returned as data by the
shelf allocation service. Only invalid inputs raise.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "DEGENERATE_YIELD_INPUT")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# DEKOJI ERRORS
# ===================

class DegenerateYieldInputError(ValidationError):
    """True yield rate requested for 10 kg of rice or less."""

    def __init__(self, total_rice_weight_kg: float, min_rice_weight_kg: float):
        super().__init__(
            message=(
                f"True yield rate needs more than {min_rice_weight_kg:g} kg of rice "
                f"(got {total_rice_weight_kg:g} kg)"
            ),
            code="DEGENERATE_YIELD_INPUT",
            details={
                "total_rice_weight_kg": total_rice_weight_kg,
                "min_rice_weight_kg": min_rice_weight_kg,
            }
        )


class InvalidYieldRateError(ValidationError):
    """Yield rate must be a positive percentage."""

    def __init__(self, yield_rate: float):
        super().__init__(
            message=f"Yield rate must be positive (got {yield_rate:g})",
            code="INVALID_YIELD_RATE",
            details={"yield_rate": yield_rate}
        )
