"""Domain errors raised by the ingestion-and-analysis pipeline."""

from __future__ import annotations


class FileInsightsError(Exception):
    """Base class for every error the pipeline raises on purpose."""


class UnconfiguredCredentialError(FileInsightsError):
    """Raised at startup when the generative service credential is missing."""


class UnsupportedFormatError(FileInsightsError):
    """Raised when an upload's extension is not a recognized document format."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"Unsupported file type: {extension or '(none)'}")


class ParseFailureError(FileInsightsError):
    """Raised when format-specific decoding of an upload fails."""

    def __init__(self, format: str, cause: BaseException | str) -> None:
        self.format = format
        self.cause = cause
        super().__init__(f"Failed to process {format} file: {cause}")


class GenerationTimeoutError(FileInsightsError):
    """Raised when a model call does not settle within its deadline."""


class MalformedModelResponseError(FileInsightsError):
    """Raised when a model reply lacks the requested metric or fails validation."""


class BatchRejectedError(FileInsightsError):
    """Raised when an upload batch is refused before any file is processed."""


class NoFilesProvidedError(BatchRejectedError):
    def __init__(self) -> None:
        super().__init__("No files provided")


class FileTooLargeError(BatchRejectedError):
    def __init__(self, filename: str, size: int, limit: int) -> None:
        self.filename = filename
        self.size = size
        self.limit = limit
        limit_mb = limit // (1024 * 1024)
        super().__init__(f"File size exceeds {limit_mb}MB limit: {filename}")


class BatchTimeoutError(FileInsightsError):
    """Raised when a whole batch overruns its outer deadline."""


__all__ = [
    "BatchRejectedError",
    "BatchTimeoutError",
    "FileInsightsError",
    "FileTooLargeError",
    "GenerationTimeoutError",
    "MalformedModelResponseError",
    "NoFilesProvidedError",
    "ParseFailureError",
    "UnconfiguredCredentialError",
    "UnsupportedFormatError",
]
