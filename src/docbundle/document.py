"""Document: an immutable configuration object with identity metadata and a data tree."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, NamedTuple

from docbundle.errors import DocumentMalformedError
from docbundle.values import freeze_copy

__all__ = ["Document", "DocumentId"]


class DocumentId(NamedTuple):
    """Identity key of a document. Two documents with equal ids are duplicates."""

    group: str
    version: str
    kind: str
    namespace: str
    name: str

    def __str__(self) -> str:
        api_version = f"{self.group}/{self.version}" if self.group else self.version
        scope = f"{self.namespace}/" if self.namespace else ""
        return f"{api_version}, Kind={self.kind} {scope}{self.name}"


def _string_map(value: Mapping[str, str] | None, what: str, name: str) -> Mapping[str, str]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise DocumentMalformedError(doc_name=name, reason=f"{what} must be a mapping")
    result: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise DocumentMalformedError(doc_name=name, reason=f"{what} must map strings to strings")
        result[key] = item
    return MappingProxyType(result)


class Document:
    """A single configuration object.

    Identity fields are fixed at construction. The data tree is copied in and
    copied out, so neither the caller's input nor values read back can alter
    the document. Use the ``with_*`` helpers to derive modified documents.

    Equality and hashing consider only the identity key
    ``(group, version, kind, namespace, name)``.
    """

    __slots__ = ("_group", "_version", "_kind", "_name", "_namespace", "_labels", "_annotations", "_data")

    def __init__(
        self,
        *,
        group: str = "",
        version: str = "",
        kind: str = "",
        name: str = "",
        namespace: str = "",
        labels: Mapping[str, str] | None = None,
        annotations: Mapping[str, str] | None = None,
        data: Any = None,
    ) -> None:
        self._group = group or ""
        self._version = version or ""
        self._kind = kind or ""
        self._name = name or ""
        self._namespace = namespace or ""
        self._labels = _string_map(labels, "labels", self._name)
        self._annotations = _string_map(annotations, "annotations", self._name)
        self._data = freeze_copy(data)

    # ----- Construction -----

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> Document:
        """Build a Document from an already-parsed Kubernetes-style mapping.

        ``apiVersion`` is split into group and version; ``metadata`` supplies
        name, namespace, labels and annotations. The whole mapping becomes the
        document data.

        Raises:
            DocumentMalformedError: If the manifest or its metadata is not a mapping.
        """
        if not isinstance(manifest, Mapping):
            raise DocumentMalformedError(doc_name="", reason="manifest must be a mapping")

        metadata = manifest.get("metadata") or {}
        if not isinstance(metadata, Mapping):
            raise DocumentMalformedError(doc_name="", reason="metadata must be a mapping")
        name = metadata.get("name") or ""
        if not isinstance(name, str):
            raise DocumentMalformedError(doc_name=str(name), reason="metadata.name must be a string")

        fields = {
            "apiVersion": manifest.get("apiVersion") or "",
            "kind": manifest.get("kind") or "",
            "metadata.namespace": metadata.get("namespace") or "",
        }
        for key, value in fields.items():
            if not isinstance(value, str):
                raise DocumentMalformedError(doc_name=name, reason=f"{key} must be a string")
        group, _, version = fields["apiVersion"].rpartition("/")

        return cls(
            group=group,
            version=version,
            kind=fields["kind"],
            name=name,
            namespace=fields["metadata.namespace"],
            labels=metadata.get("labels"),
            annotations=metadata.get("annotations"),
            data=dict(manifest),
        )

    # ----- Identity -----

    @property
    def group(self) -> str:
        return self._group

    @property
    def version(self) -> str:
        return self._version

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def name(self) -> str:
        return self._name

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def labels(self) -> Mapping[str, str]:
        """Read-only view of the labels."""
        return self._labels

    @property
    def annotations(self) -> Mapping[str, str]:
        """Read-only view of the annotations."""
        return self._annotations

    @property
    def api_version(self) -> str:
        """``group/version``, or just ``version`` for the core group."""
        return f"{self._group}/{self._version}" if self._group else self._version

    @property
    def id(self) -> DocumentId:
        return DocumentId(self._group, self._version, self._kind, self._namespace, self._name)

    @property
    def is_materialized(self) -> bool:
        """False for documents with an empty name, which never match a selector."""
        return self._name != ""

    # ----- Payload -----

    @property
    def data(self) -> Any:
        """A deep copy of the data tree."""
        return freeze_copy(self._data)

    @property
    def raw_data(self) -> Any:
        """The stored data tree itself, without copying. Must not be mutated."""
        return self._data

    def to_manifest(self) -> Any:
        return freeze_copy(self._data)

    # ----- Derivation -----

    def _derive(self, **changes: Any) -> Document:
        fields: dict[str, Any] = {
            "group": self._group,
            "version": self._version,
            "kind": self._kind,
            "name": self._name,
            "namespace": self._namespace,
            "labels": self._labels,
            "annotations": self._annotations,
            "data": self._data,
        }
        fields.update(changes)
        return Document(**fields)

    def with_data(self, data: Any) -> Document:
        return self._derive(data=data)

    def with_labels(self, labels: Mapping[str, str]) -> Document:
        return self._derive(labels=labels)

    def with_annotations(self, annotations: Mapping[str, str]) -> Document:
        return self._derive(annotations=annotations)

    def with_namespace(self, namespace: str) -> Document:
        return self._derive(namespace=namespace)

    # ----- Dunder -----

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, name):
            raise AttributeError(f"Document is immutable; cannot set '{name}'")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return (
            f"Document(api_version={self.api_version!r}, kind={self._kind!r}, "
            f"namespace={self._namespace!r}, name={self._name!r})"
        )
