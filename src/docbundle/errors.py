"""Error hierarchy for docbundle."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docbundle.selector import Selector

__all__ = [
    "DocumentError",
    "DocNotFoundError",
    "MultiDocsFoundError",
    "DocIndexOutOfRangeError",
    "DocumentDataKeyNotFoundError",
    "DocumentMalformedError",
    "InvalidInputError",
    "ConfigError",
    "ConfigNotFoundError",
    "ErrorCodes",
]


class DocumentError(Exception):
    """Base error for all docbundle errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class DocNotFoundError(DocumentError):
    """Raised when a selector matched no documents where exactly one was required."""

    def __init__(self, selector: Selector, **kwargs: Any) -> None:
        super().__init__(
            code="DOC_NOT_FOUND",
            message=f"document filtered by selector {selector} found no documents",
            details={"selector": selector},
            **kwargs,
        )

    @property
    def selector(self) -> Selector:
        """The selector that matched nothing."""
        return self.details["selector"]


class MultiDocsFoundError(DocumentError):
    """Raised when a selector matched several documents where exactly one was required."""

    def __init__(self, selector: Selector, **kwargs: Any) -> None:
        super().__init__(
            code="MULTI_DOCS_FOUND",
            message=f"document filtered by selector {selector} found more than one document",
            details={"selector": selector},
            **kwargs,
        )

    @property
    def selector(self) -> Selector:
        """The ambiguous selector."""
        return self.details["selector"]


class DocIndexOutOfRangeError(DocumentError):
    """Raised when a positional selection falls outside the matched documents."""

    def __init__(self, selector: Selector, index: int, count: int, **kwargs: Any) -> None:
        super().__init__(
            code="DOC_INDEX_OUT_OF_RANGE",
            message=(
                f"document filtered by selector {selector} has no document at index {index} "
                f"({count} matched)"
            ),
            details={"selector": selector, "index": index, "count": count},
            **kwargs,
        )

    @property
    def selector(self) -> Selector:
        """The selector used to build the candidate list."""
        return self.details["selector"]

    @property
    def index(self) -> int:
        """The requested position."""
        return self.details["index"]

    @property
    def count(self) -> int:
        """How many documents the selector matched."""
        return self.details["count"]


class DocumentDataKeyNotFoundError(DocumentError):
    """Raised when a key path cannot be resolved inside a document's data."""

    def __init__(self, doc_name: str, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="DOCUMENT_DATA_KEY_NOT_FOUND",
            message=f'document "{doc_name}" cannot retrieve data key "{key}"',
            details={"doc_name": doc_name, "key": key},
            **kwargs,
        )

    @property
    def doc_name(self) -> str:
        """Name of the document that was searched."""
        return self.details["doc_name"]

    @property
    def key(self) -> str:
        """The full requested key path."""
        return self.details["key"]


class DocumentMalformedError(DocumentError):
    """Raised when a document is structurally malformed (e.g. missing required keys)."""

    def __init__(self, doc_name: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="DOCUMENT_MALFORMED",
            message=f'document "{doc_name}" is malformed: "{reason}"',
            details={"doc_name": doc_name, "reason": reason},
            **kwargs,
        )

    @property
    def doc_name(self) -> str:
        """Name of the malformed document."""
        return self.details["doc_name"]

    @property
    def reason(self) -> str:
        """Which requirement was unmet."""
        return self.details["reason"]


class InvalidInputError(DocumentError):
    """Raised for invalid caller input."""

    def __init__(self, message: str = "Invalid input", **kwargs: Any) -> None:
        super().__init__(code="GENERAL_INVALID_INPUT", message=message, **kwargs)


class ConfigError(DocumentError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class ConfigNotFoundError(DocumentError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ErrorCodes:
    """All docbundle error codes as constants.

    Example:
        try:
            bundle.select_one(selector)
        except DocumentError as e:
            if e.code == ErrorCodes.DOC_NOT_FOUND:
                handle_missing()
    """

    DOC_NOT_FOUND = "DOC_NOT_FOUND"
    MULTI_DOCS_FOUND = "MULTI_DOCS_FOUND"
    DOC_INDEX_OUT_OF_RANGE = "DOC_INDEX_OUT_OF_RANGE"
    DOCUMENT_DATA_KEY_NOT_FOUND = "DOCUMENT_DATA_KEY_NOT_FOUND"
    DOCUMENT_MALFORMED = "DOCUMENT_MALFORMED"
    GENERAL_INVALID_INPUT = "GENERAL_INVALID_INPUT"
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
