"""docbundle - Selector-based querying over bundles of configuration documents."""

from __future__ import annotations

# Core
from docbundle.bundle import Bundle
from docbundle.document import Document, DocumentId
from docbundle.selector import MatchMode, Selector

# Data access
from docbundle.accessor import DataAccessor, KeyPath, get_value
from docbundle.values import ValueKind, kind_of

# Validation
from docbundle.scheme import KindSpec, Scheme, default_scheme
from docbundle.validator import ValidationResult, Validator

# Sources
from docbundle.source import DocumentSource, ManifestSource

# Config
from docbundle.config import Config

# Errors
from docbundle.errors import (
    ConfigError,
    ConfigNotFoundError,
    DocIndexOutOfRangeError,
    DocNotFoundError,
    DocumentDataKeyNotFoundError,
    DocumentError,
    DocumentMalformedError,
    ErrorCodes,
    InvalidInputError,
    MultiDocsFoundError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Bundle",
    "Document",
    "DocumentId",
    "Selector",
    "MatchMode",
    # Data access
    "DataAccessor",
    "KeyPath",
    "get_value",
    "ValueKind",
    "kind_of",
    # Validation
    "KindSpec",
    "Scheme",
    "default_scheme",
    "Validator",
    "ValidationResult",
    # Sources
    "DocumentSource",
    "ManifestSource",
    # Config
    "Config",
    # Errors
    "ErrorCodes",
    "DocumentError",
    "DocNotFoundError",
    "MultiDocsFoundError",
    "DocIndexOutOfRangeError",
    "DocumentDataKeyNotFoundError",
    "DocumentMalformedError",
    "InvalidInputError",
    "ConfigError",
    "ConfigNotFoundError",
]
