"""Error kinds raised across parsing, extraction and caching."""

from __future__ import annotations


class FactExtractorError(RuntimeError):
    """Base class for request-level failures."""


class InvalidArgumentError(FactExtractorError):
    """Raised when a cache key or file path is missing or empty."""


class SourceNotFoundError(FactExtractorError):
    """Raised when no candidate path resolves to an existing file."""


class UnsupportedKindError(FactExtractorError):
    """Raised when a file extension is outside the supported set."""

    def __init__(self, extension: str, supported: tuple[str, ...] = ()) -> None:
        self.extension = extension
        self.supported = supported
        message = f"Unsupported file type: {extension or '<none>'}"
        if supported:
            message += f" (expected one of: {', '.join(supported)})"
        super().__init__(message)


class FileTooLargeError(FactExtractorError):
    """Raised when content exceeds the configured byte ceiling."""

    def __init__(self, path: str, size: int, limit: int) -> None:
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large: {path} ({size / (1024 * 1024):.2f}MB exceeds "
            f"maximum of {limit / (1024 * 1024):.2f}MB)"
        )


class ParseFailureError(FactExtractorError):
    """Raised when the grammar parser cannot produce a tree."""


class ExtractionFailure(FactExtractorError):
    """A single node could not be interpreted as a fact.

    Never escapes an extractor: the traversal logs it and moves on.
    """
