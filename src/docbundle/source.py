"""Document sources: where a Bundle's documents come from."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol, runtime_checkable

from docbundle.document import Document
from docbundle.errors import DocumentMalformedError

logger = logging.getLogger(__name__)

__all__ = ["DocumentSource", "ManifestSource"]


@runtime_checkable
class DocumentSource(Protocol):
    """Anything that can produce already-parsed Documents."""

    def documents(self) -> Iterable[Document]: ...


class ManifestSource:
    """Adapts already-parsed manifest mappings into Documents.

    ``None`` entries (empty YAML documents in a stream) are skipped.

    With ``fail_fast`` (the default) the first malformed manifest raises.
    Otherwise malformed manifests are left out and their errors are kept in
    ``errors``, in input order, until the next read.
    """

    def __init__(self, manifests: Iterable[Mapping[str, Any] | None], fail_fast: bool = True) -> None:
        self._manifests = list(manifests)
        self._fail_fast = fail_fast
        self.errors: list[DocumentMalformedError] = []

    def documents(self) -> Iterator[Document]:
        """Yield one Document per manifest.

        Raises:
            DocumentMalformedError: With ``fail_fast``, on the first malformed manifest.
        """
        self.errors = []
        for manifest in self._manifests:
            if manifest is None:
                continue
            try:
                doc = Document.from_manifest(manifest)
            except DocumentMalformedError as e:
                if self._fail_fast:
                    raise
                logger.debug("Skipping malformed manifest: %s", e)
                self.errors.append(e)
                continue
            yield doc
