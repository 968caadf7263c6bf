"""Error taxonomy for the analysis pipeline.

Each error carries a client-safe ``message`` and the HTTP ``status_code`` the
API layer answers with. Input and extraction errors are hard failures; the
reasoning errors are absorbed by the orchestrator and replaced with the
fallback result.
"""


class ContractShieldError(Exception):
    """Base class for all expected pipeline errors."""

    status_code = 500
    default_message = "Analysis failed"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(ContractShieldError):
    status_code = 400
    default_message = "Invalid input"


class PayloadTooLarge(InvalidInput):
    status_code = 413
    default_message = "File is too large"


class ExtractionFailed(ContractShieldError):
    """The uploaded file could not be converted to text."""

    status_code = 400
    default_message = "Failed to extract text from file"

    def __init__(self, reason: str = ""):
        self.reason = reason
        message = f"{self.default_message}: {reason}" if reason else self.default_message
        super().__init__(message)


class NoExtractableText(ContractShieldError):
    status_code = 400
    default_message = (
        "No readable text found in the file. Make sure it isn't a blank or low-quality scan."
    )


class ReasoningServiceFailed(ContractShieldError):
    """Transport, auth, timeout or provider-side failure."""

    status_code = 502
    default_message = "Reasoning service unavailable"

    def __init__(self, cause: str = ""):
        self.cause = cause
        message = f"{self.default_message}: {cause}" if cause else self.default_message
        super().__init__(message)


class MalformedReasoningOutput(ContractShieldError):
    status_code = 502
    default_message = "Reasoning service returned malformed output"


class NotFound(ContractShieldError):
    status_code = 404
    default_message = "Analysis not found"


class Internal(ContractShieldError):
    status_code = 500
    default_message = "Internal server error"
