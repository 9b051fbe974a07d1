"""Selector: a declarative, conjunctive filter over document identity fields."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from docbundle.errors import ConfigError, InvalidInputError

if TYPE_CHECKING:
    from docbundle.config import Config
    from docbundle.document import Document

__all__ = ["MatchMode", "Selector"]


class MatchMode(str, Enum):
    """How label and annotation criteria are compared to a document."""

    SUBSET = "subset"
    EXACT = "exact"


def _parse_label_selector(expression: str) -> dict[str, str]:
    """Parse ``key=value,key2==value2`` equality terms."""
    result: dict[str, str] = {}
    for raw_term in expression.split(","):
        term = raw_term.strip()
        if not term:
            continue
        if "!=" in term:
            raise InvalidInputError(message=f"Unsupported label selector term '{term}': only equality is allowed")
        key, sep, value = term.replace("==", "=", 1).partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidInputError(message=f"Invalid label selector term '{term}': expected key=value")
        result[key] = value.strip()
    return result


def _describe_errors(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(segment) for segment in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', '')}" if loc else err.get("msg", ""))
    return "; ".join(parts)


def _map_matches(wanted: Mapping[str, str], actual: Mapping[str, str], mode: MatchMode) -> bool:
    if mode is MatchMode.EXACT:
        return dict(wanted) == dict(actual)
    for key, value in wanted.items():
        if actual.get(key) != value:
            return False
    return True


class Selector(BaseModel):
    """Filter criteria for selecting documents from a Bundle.

    Every populated criterion must agree with the document (logical AND); an
    empty string or empty mapping leaves that criterion unset. Labels and
    annotations are matched as a required subset by default, or as an exact
    set with ``label_match=MatchMode.EXACT`` (an empty mapping stays unset in
    both modes).

    ``index`` is not evaluated here. A Bundle applies it after the other
    criteria have narrowed the candidates.

    Selectors are frozen and hashable, labels and annotations are read-only
    mappings, and builder methods return new, revalidated selectors::

        Selector().by_kind("Deployment").by_label("app", "web")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    group: str = ""
    version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    labels: Mapping[str, str] = Field(default_factory=dict)
    annotations: Mapping[str, str] = Field(default_factory=dict)
    index: int | None = Field(default=None, ge=0)
    label_match: MatchMode = MatchMode.SUBSET

    def __init__(self, **data: Any) -> None:
        """Validate the criteria.

        Raises:
            InvalidInputError: If a criterion has the wrong type, ``index`` is
                negative, or an unknown criterion is given.
        """
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise InvalidInputError(message=f"Invalid selector: {_describe_errors(e)}", cause=e) from e

    @field_validator("labels", "annotations", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    # ----- Construction -----

    @classmethod
    def from_config(cls, config: Config, **criteria: Any) -> Selector:
        """Create a selector whose match mode comes from ``selector.label_match``.

        Raises:
            ConfigError: If the configured mode is not 'subset' or 'exact'.
            InvalidInputError: If a criterion is invalid.
        """
        mode = config.get("selector.label_match", MatchMode.SUBSET.value)
        try:
            label_match = MatchMode(mode)
        except ValueError:
            raise ConfigError(message=f"Invalid selector.label_match: {mode!r}") from None
        criteria.setdefault("label_match", label_match)
        return cls(**criteria)

    @classmethod
    def from_document(cls, doc: Document) -> Selector:
        """A selector for exactly the identity of ``doc``."""
        return cls(
            group=doc.group,
            version=doc.version,
            kind=doc.kind,
            name=doc.name,
            namespace=doc.namespace,
        )

    def _with(self, **changes: Any) -> Selector:
        fields = {name: getattr(self, name) for name in type(self).model_fields}
        fields["labels"] = dict(self.labels)
        fields["annotations"] = dict(self.annotations)
        fields.update(changes)
        return type(self)(**fields)

    def by_gvk(self, group: str, version: str, kind: str) -> Selector:
        return self._with(group=group, version=version, kind=kind)

    def by_kind(self, kind: str) -> Selector:
        return self._with(kind=kind)

    def by_name(self, name: str) -> Selector:
        return self._with(name=name)

    def by_namespace(self, namespace: str) -> Selector:
        return self._with(namespace=namespace)

    def by_label(self, key: str, value: str) -> Selector:
        return self._with(labels={**self.labels, key: value})

    def by_labels(self, labels: Mapping[str, str]) -> Selector:
        return self._with(labels={**self.labels, **labels})

    def by_label_selector(self, expression: str) -> Selector:
        """Add labels from a ``key=value,other=value`` expression.

        Raises:
            InvalidInputError: If a term is not an equality term.
        """
        return self.by_labels(_parse_label_selector(expression))

    def by_annotation(self, key: str, value: str) -> Selector:
        return self._with(annotations={**self.annotations, key: value})

    def by_index(self, index: int) -> Selector:
        if index < 0:
            raise InvalidInputError(message=f"Selector index must be >= 0, got {index}")
        return self._with(index=index)

    # ----- Matching -----

    @property
    def is_empty(self) -> bool:
        """True when no criteria are set, so every materialized document matches."""
        return not (
            self.group
            or self.version
            or self.kind
            or self.name
            or self.namespace
            or self.labels
            or self.annotations
            or self.index is not None
        )

    def matches(self, doc: Document) -> bool:
        """Return True if ``doc`` satisfies every populated criterion."""
        if not doc.is_materialized:
            return False
        if self.group and doc.group != self.group:
            return False
        if self.version and doc.version != self.version:
            return False
        if self.kind and doc.kind != self.kind:
            return False
        if self.name and doc.name != self.name:
            return False
        if self.namespace and doc.namespace != self.namespace:
            return False
        if self.labels and not _map_matches(self.labels, doc.labels, self.label_match):
            return False
        if self.annotations and not _map_matches(self.annotations, doc.annotations, self.label_match):
            return False
        return True

    def __hash__(self) -> int:
        return hash(
            (
                self.group,
                self.version,
                self.kind,
                self.name,
                self.namespace,
                frozenset(self.labels.items()),
                frozenset(self.annotations.items()),
                self.index,
                self.label_match,
            )
        )

    def __str__(self) -> str:
        parts: list[str] = []
        for field_name in ("group", "version", "kind", "name", "namespace"):
            value = getattr(self, field_name)
            if value:
                parts.append(f"{field_name}={value}")
        if self.labels:
            parts.append("labels=" + ",".join(f"{k}={v}" for k, v in sorted(self.labels.items())))
        if self.annotations:
            parts.append("annotations=" + ",".join(f"{k}={v}" for k, v in sorted(self.annotations.items())))
        if self.index is not None:
            parts.append(f"index={self.index}")
        if self.label_match is MatchMode.EXACT and (self.labels or self.annotations):
            parts.append("match=exact")
        return "{" + " ".join(parts) + "}"
