"""Custom exception classes for the contract analysis pipeline."""

from typing import Any, List, Optional


class ContractAnalysisError(Exception):
    """Base exception for all pipeline errors."""

    status_code: int = 500


class ConfigurationError(ContractAnalysisError):
    """Exception raised when configuration is invalid or missing."""

    pass


class UnsupportedMediaTypeError(ContractAnalysisError):
    """Exception raised when a declared MIME type is not on the allow-list."""

    status_code = 415

    def __init__(self, mime_type: str, allowed: List[str]):
        self.mime_type = mime_type
        self.allowed = list(allowed)
        super().__init__(
            f"File type {mime_type} is not supported. Allowed types: {', '.join(self.allowed)}"
        )


class ExtractionError(ContractAnalysisError):
    """Exception raised when a text extraction strategy fails."""

    status_code = 422

    def __init__(self, method: Any, cause: BaseException):
        self.method = method
        self.cause = cause
        label = getattr(method, "value", method)
        super().__init__(f"Text extraction failed ({label}): {cause}")


class EmptyDocumentError(ContractAnalysisError):
    """Exception raised by callers when a document yields no usable text."""

    status_code = 400


class ProviderError(ContractAnalysisError):
    """Exception raised when the LLM provider call fails at the transport level."""

    status_code = 502

    def __init__(self, cause: BaseException, status: Optional[int] = None):
        self.cause = cause
        self.status = status
        super().__init__(f"LLM provider request failed: {cause}")


class EmptyResponseError(ContractAnalysisError):
    """Exception raised when the provider answers without any message content."""

    status_code = 502

    def __init__(self, message: str = "Empty response from AI"):
        super().__init__(message)


class UnparsableResponseError(ContractAnalysisError):
    """Exception raised when no JSON object can be recovered from a model response."""

    status_code = 502

    def __init__(self, raw_text: str):
        self.raw_text = raw_text
        super().__init__("Failed to parse JSON from model response")


class SchemaValidationError(ContractAnalysisError):
    """Exception raised when a recovered value fails both the strict and lenient schema."""

    status_code = 502

    def __init__(self, parsed_value: Any, errors: Optional[List[dict]] = None):
        self.parsed_value = parsed_value
        self.errors = errors or []
        super().__init__(f"LLM response failed validation ({len(self.errors)} errors)")
