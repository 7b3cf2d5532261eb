"""Exception hierarchy for the hotel ledger report engine.

All engine exceptions inherit from HotelLedgerReportsError so a reports
screen can catch every engine failure with a single base class while
still telling validation, source and encoding problems apart.
"""

from typing import Any


class HotelLedgerReportsError(Exception):
    """Base exception for all report engine errors.

    Includes an error_code for user-facing messages and extra context.
    """

    error_code: str = "HLR_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for display or logging."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Validation Errors
# =============================================================================


class ReportValidationError(HotelLedgerReportsError):
    """Raised before any request is issued when a filter is unusable."""

    error_code = "VALIDATION_ERROR"


class MissingFilterFieldError(ReportValidationError):
    """Raised when a variant's required filter field is empty."""

    error_code = "MISSING_FILTER_FIELD"

    def __init__(self, field_name: str, variant: str) -> None:
        super().__init__(
            f"{field_name} is required for the {variant} report",
            context={"field": field_name, "variant": variant},
        )
        self.field_name = field_name


class InvalidPaginationError(ReportValidationError):
    """Raised when page or page size is not a positive integer."""

    error_code = "INVALID_PAGINATION"

    def __init__(self, page: int, page_size: int) -> None:
        super().__init__(
            f"Invalid pagination: page={page}, page_size={page_size}",
            context={"page": page, "page_size": page_size},
        )


# =============================================================================
# Source Errors
# =============================================================================


class SourceError(HotelLedgerReportsError):
    """Raised when the ledger source request fails."""

    error_code = "SOURCE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.status_code = status_code
        if status_code is not None:
            self.context["status_code"] = status_code


class MalformedResponseError(SourceError):
    """Raised when the ledger source answers with something that is not JSON."""

    error_code = "MALFORMED_RESPONSE"


# =============================================================================
# Artifact Errors
# =============================================================================


class ExportEncodingError(HotelLedgerReportsError):
    """Raised when export text cannot be encoded under the chosen policy."""

    error_code = "ENCODING_ERROR"

    def __init__(self, encoding: str, reason: str) -> None:
        super().__init__(
            f"Cannot encode export as {encoding}: {reason}",
            context={"encoding": encoding, "reason": reason},
        )


class PreviewError(HotelLedgerReportsError):
    """Raised when a print preview resource is used after it was revoked."""

    error_code = "PREVIEW_ERROR"
