"""Validator: structural well-formedness checks for documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable

from docbundle.accessor import DataAccessor
from docbundle.errors import DocumentMalformedError, InvalidInputError
from docbundle.scheme import Scheme
from docbundle.values import check_tree

if TYPE_CHECKING:
    from docbundle.config import Config
    from docbundle.document import Document

logger = logging.getLogger(__name__)

__all__ = ["Validator", "ValidationResult", "DEFAULT_PLACEHOLDER_ANNOTATION"]

DEFAULT_PLACEHOLDER_ANNOTATION = "docbundle.io/placeholder"

PlaceholderCheck = Callable[["Document"], bool]


@dataclass
class ValidationResult:
    """All violations found for one document."""

    doc_name: str
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_error(self) -> DocumentMalformedError:
        """Convert this result into a DocumentMalformedError for its first violation."""
        if self.valid:
            raise ValueError("Cannot convert valid result to error")
        return DocumentMalformedError(doc_name=self.doc_name, reason=self.errors[0])


def annotation_placeholder_check(annotation: str = DEFAULT_PLACEHOLDER_ANNOTATION) -> PlaceholderCheck:
    """Build a check that treats documents annotated ``<annotation>: "true"`` as placeholders."""

    def check(doc: Document) -> bool:
        return doc.annotations.get(annotation, "").lower() == "true"

    return check


class Validator:
    """Checks documents against a minimal structural contract.

    A document must have a kind and, unless it is a placeholder, a name. When
    the scheme knows the document's kind, every required key must resolve in
    its data and cluster-scoped kinds must not carry a namespace. Validation
    never mutates the document and gives the same answer every time.
    """

    def __init__(
        self,
        scheme: Scheme | None = None,
        require_name: bool = True,
        placeholder_check: PlaceholderCheck | None = None,
    ) -> None:
        self._scheme = scheme if scheme is not None else Scheme()
        self._require_name = require_name
        self._placeholder_check = (
            placeholder_check if placeholder_check is not None else annotation_placeholder_check()
        )
        self._accessor = DataAccessor()

    @classmethod
    def from_config(cls, config: Config, scheme: Scheme | None = None) -> Validator:
        """Create a Validator from ``validation.*`` config keys.

        An explicit ``scheme`` wins over ``validation.scheme_file``.

        Raises:
            ConfigNotFoundError: If the configured scheme file is missing.
            ConfigError: If the scheme file is invalid.
        """
        if scheme is None:
            scheme_file = config.get("validation.scheme_file")
            scheme = Scheme.from_file(scheme_file) if scheme_file else Scheme()
        annotation = config.get("validation.placeholder_annotation", DEFAULT_PLACEHOLDER_ANNOTATION)
        return cls(
            scheme=scheme,
            require_name=bool(config.get("validation.require_name", True)),
            placeholder_check=annotation_placeholder_check(annotation),
        )

    @property
    def scheme(self) -> Scheme:
        return self._scheme

    def check(self, doc: Document) -> ValidationResult:
        """Collect every violation for ``doc``."""
        result = ValidationResult(doc_name=doc.name)

        if not doc.kind:
            result.errors.append("kind is required")
        if self._require_name and not doc.name and not self._placeholder_check(doc):
            result.errors.append("metadata.name is required")

        try:
            check_tree(doc.raw_data)
        except InvalidInputError as e:
            result.errors.append(e.message)

        spec = self._scheme.lookup(doc)
        if spec is not None:
            if not spec.namespaced and doc.namespace:
                result.errors.append(f"{doc.kind} is cluster-scoped and must not set namespace '{doc.namespace}'")
            for key in spec.required_keys:
                if not self._accessor.has(doc, key):
                    result.errors.append(f"required key '{key}' is missing for kind {doc.kind}")

        return result

    def validate(self, doc: Document) -> None:
        """Raise DocumentMalformedError for the first unmet requirement.

        Raises:
            DocumentMalformedError: If the document is malformed.
        """
        result = self.check(doc)
        if not result.valid:
            raise result.to_error()

    def validate_all(self, docs: Iterable[Document], fail_fast: bool = True) -> list[DocumentMalformedError]:
        """Validate many documents.

        With ``fail_fast`` the first error is raised; otherwise one error per
        malformed document is returned, in input order.

        Raises:
            DocumentMalformedError: With ``fail_fast``, on the first malformed document.
        """
        errors: list[DocumentMalformedError] = []
        for doc in docs:
            result = self.check(doc)
            if result.valid:
                continue
            if fail_fast:
                raise result.to_error()
            errors.append(result.to_error())
        if errors:
            logger.debug("Validation found %d malformed document(s)", len(errors))
        return errors
