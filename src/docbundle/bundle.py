"""Bundle: an ordered, immutable collection of documents queried with selectors."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from docbundle.document import Document, DocumentId
from docbundle.errors import (
    DocIndexOutOfRangeError,
    DocNotFoundError,
    DocumentMalformedError,
    MultiDocsFoundError,
)
from docbundle.selector import Selector
from docbundle.source import DocumentSource, ManifestSource

if TYPE_CHECKING:
    from docbundle.validator import Validator

logger = logging.getLogger(__name__)

__all__ = ["Bundle"]


class Bundle:
    """An ordered collection of Documents.

    A Bundle is never modified after construction. Filtering and the
    ``append``/``extend``/``merge``/``replace`` operations return new
    Bundles that share the (immutable) Document values, so a Bundle can be
    queried from several threads without locking.

    The Bundle does not deduplicate. Two documents with the same identity both
    stay in the bundle, and ``select_one`` reports them as ambiguous.
    """

    __slots__ = ("_docs",)

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        self._docs: tuple[Document, ...] = tuple(documents)
        for doc in self._docs:
            if not isinstance(doc, Document):
                raise TypeError(f"Bundle items must be Document instances, got {type(doc).__name__}")

    @classmethod
    def from_manifests(cls, manifests: Iterable[Mapping[str, Any] | None]) -> Bundle:
        """Build a Bundle from already-parsed manifest mappings.

        Raises:
            DocumentMalformedError: On the first malformed manifest.
        """
        return cls.from_source(ManifestSource(manifests))

    @classmethod
    def collect_manifests(
        cls, manifests: Iterable[Mapping[str, Any] | None]
    ) -> tuple[Bundle, list[DocumentMalformedError]]:
        """Like from_manifests(), but malformed manifests are returned as errors instead of raised."""
        source = ManifestSource(manifests, fail_fast=False)
        bundle = cls.from_source(source)
        return bundle, source.errors

    @classmethod
    def from_source(cls, source: DocumentSource) -> Bundle:
        bundle = cls(source.documents())
        logger.debug("Built bundle with %d document(s) from %s", len(bundle), type(source).__name__)
        return bundle

    # ----- Query Methods -----

    def filter(self, selector: Selector) -> list[Document]:
        """Return every document matching ``selector``, in bundle order.

        Returns an empty list when nothing matches. ``selector.index`` is
        ignored; use select_by_index() for positional selection.
        """
        return [doc for doc in self._docs if selector.matches(doc)]

    def filtered(self, selector: Selector) -> Bundle:
        """Like filter(), but wrapped in a new Bundle."""
        return Bundle(self.filter(selector))

    def select_one(self, selector: Selector) -> Document:
        """Return the single document matching ``selector``.

        If ``selector.index`` is set this is select_by_index() at that index.

        Raises:
            DocNotFoundError: If nothing matched.
            MultiDocsFoundError: If more than one document matched.
            DocIndexOutOfRangeError: If ``selector.index`` is set and out of range.
        """
        if selector.index is not None:
            return self.select_by_index(selector, selector.index)

        matches = self.filter(selector)
        if not matches:
            raise DocNotFoundError(selector=selector)
        if len(matches) > 1:
            raise MultiDocsFoundError(selector=selector)
        return matches[0]

    def select_by_index(self, selector: Selector, index: int) -> Document:
        """Return the ``index``-th (0-based) document matching ``selector``.

        Raises:
            DocIndexOutOfRangeError: If ``index`` is negative or not below the
                number of matches, including when nothing matched.
        """
        matches = self.filter(selector)
        if index < 0 or index >= len(matches):
            raise DocIndexOutOfRangeError(selector=selector, index=index, count=len(matches))
        return matches[index]

    def duplicates(self) -> list[DocumentId]:
        """Identity keys that occur more than once, in first-seen order."""
        counts: dict[DocumentId, int] = {}
        for doc in self._docs:
            counts[doc.id] = counts.get(doc.id, 0) + 1
        return [doc_id for doc_id, n in counts.items() if n > 1]

    def validate(self, validator: Validator, fail_fast: bool = True) -> list[DocumentMalformedError]:
        """Run ``validator`` over every document. See Validator.validate_all()."""
        return validator.validate_all(self._docs, fail_fast=fail_fast)

    # ----- Derivation -----

    def append(self, doc: Document) -> Bundle:
        return Bundle((*self._docs, doc))

    def extend(self, docs: Iterable[Document]) -> Bundle:
        return Bundle((*self._docs, *docs))

    def merge(self, other: Bundle) -> Bundle:
        """A new Bundle with this bundle's documents followed by ``other``'s."""
        return self.extend(other._docs)

    def replace(self, doc: Document) -> Bundle:
        """Swap the document sharing ``doc``'s identity for ``doc``, keeping its position.

        Raises:
            DocNotFoundError: If no document has that identity.
            MultiDocsFoundError: If several documents have that identity.
        """
        selector = Selector.from_document(doc)
        positions = [i for i, existing in enumerate(self._docs) if existing.id == doc.id]
        if not positions:
            raise DocNotFoundError(selector=selector)
        if len(positions) > 1:
            raise MultiDocsFoundError(selector=selector)
        docs = list(self._docs)
        docs[positions[0]] = doc
        return Bundle(docs)

    # ----- Sequence protocol -----

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._docs

    def __len__(self) -> int:
        return len(self._docs)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._docs)

    def __contains__(self, item: object) -> bool:
        return item in self._docs

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bundle):
            return NotImplemented
        return self._docs == other._docs

    def __hash__(self) -> int:
        return hash(self._docs)

    def __repr__(self) -> str:
        return f"Bundle({len(self._docs)} documents)"
