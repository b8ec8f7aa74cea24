"""Custom exceptions for marksplit."""

from typing import Any, Dict, Optional


class MarksplitException(Exception):
    """Base exception for all marksplit errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DocumentProcessingError(MarksplitException):
    """Raised when document processing fails."""
    pass


class DocumentDiscoveryError(DocumentProcessingError):
    """Raised when the input directory cannot be enumerated."""
    pass


class OutputWriteError(DocumentProcessingError):
    """Raised when the output directory or result file cannot be written."""
    pass


class ExternalToolError(MarksplitException):
    """Raised when an external tool invocation fails."""

    def __init__(
        self,
        message: str,
        capability: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.capability = capability


class ExternalToolTimeout(ExternalToolError):
    """Raised when an external tool invocation exceeds its timeout."""
    pass


class MetadataFileError(MarksplitException):
    """Raised when the metadata description file cannot be read."""
    pass


class TruncationError(MarksplitException):
    """Raised when the result JSON cannot be read or written for truncation."""
    pass
