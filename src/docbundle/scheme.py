"""Scheme: an explicitly constructed registry of known document kinds."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

import yaml

from docbundle.accessor import KeyPath
from docbundle.errors import ConfigError, ConfigNotFoundError, InvalidInputError

if TYPE_CHECKING:
    from docbundle.document import Document

logger = logging.getLogger(__name__)

__all__ = ["KindSpec", "Scheme", "default_scheme"]

GroupVersionKind = tuple[str, str, str]


@dataclass(frozen=True)
class KindSpec:
    """Structural rules for one document kind.

    Attributes:
        group: API group; empty for the core group.
        version: API version within the group.
        kind: Kind name.
        namespaced: False for cluster-scoped kinds, which must not carry a namespace.
        required_keys: Key paths that must resolve in the document data.
    """

    group: str
    version: str
    kind: str
    namespaced: bool = True
    required_keys: tuple[KeyPath, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.kind:
            raise InvalidInputError(message="KindSpec.kind must be a non-empty string")
        object.__setattr__(self, "required_keys", tuple(KeyPath.parse(k) for k in self.required_keys))

    @property
    def gvk(self) -> GroupVersionKind:
        return (self.group, self.version, self.kind)


class Scheme:
    """Registry of KindSpecs keyed by (group, version, kind).

    There is no process-wide instance; construct one (or use
    :func:`default_scheme`) and pass it to whatever needs it.
    """

    def __init__(self, specs: list[KindSpec] | None = None) -> None:
        self._kinds: dict[GroupVersionKind, KindSpec] = {}
        self._lock = threading.RLock()
        for spec in specs or []:
            self.register(spec)

    @classmethod
    def from_file(cls, path: str | Path) -> Scheme:
        """Load a Scheme from a YAML file with a top-level ``kinds`` list.

        Each entry needs ``kind``; ``group``, ``version``, ``namespaced`` and
        ``required`` (a list of key paths) are optional. Entries without a kind
        are skipped with a warning.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the YAML is invalid or the structure is wrong.
        """
        scheme_path = Path(path)
        if not scheme_path.exists():
            raise ConfigNotFoundError(config_path=str(scheme_path))

        try:
            content = scheme_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(message=f"Cannot read scheme file: {scheme_path}", cause=e) from e
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in scheme file: {scheme_path}", cause=e) from e

        if not isinstance(parsed, dict) or not isinstance(parsed.get("kinds"), list):
            raise ConfigError(message=f"Scheme file must contain a 'kinds' list: {scheme_path}")

        scheme = cls()
        for entry in parsed["kinds"]:
            if not isinstance(entry, dict):
                raise ConfigError(message=f"Scheme entry must be a mapping: {entry!r}")
            if not entry.get("kind"):
                logger.warning("Scheme entry missing 'kind', skipping: %s", entry)
                continue
            required = entry.get("required") or []
            if not isinstance(required, list):
                raise ConfigError(message=f"'required' must be a list for kind {entry['kind']}")
            namespaced = entry.get("namespaced", True)
            if not isinstance(namespaced, bool):
                raise ConfigError(message=f"'namespaced' must be a boolean for kind {entry['kind']}")
            try:
                spec = KindSpec(
                    group=str(entry.get("group") or ""),
                    version=str(entry.get("version") or ""),
                    kind=str(entry["kind"]),
                    namespaced=namespaced,
                    required_keys=tuple(KeyPath.parse(k) for k in required),
                )
                scheme.register(spec)
            except InvalidInputError as e:
                raise ConfigError(message=f"Invalid scheme entry for kind {entry['kind']}: {e.message}", cause=e) from e
        return scheme

    # ----- Registration -----

    def register(self, spec: KindSpec) -> None:
        """Add a KindSpec.

        Raises:
            InvalidInputError: If the (group, version, kind) is already registered.
        """
        with self._lock:
            if spec.gvk in self._kinds:
                raise InvalidInputError(message=f"Kind already registered: {'/'.join(spec.gvk)}")
            self._kinds[spec.gvk] = spec
        logger.debug("Registered kind %s", "/".join(spec.gvk))

    def unregister(self, group: str, version: str, kind: str) -> bool:
        """Remove a KindSpec. Returns False if it was not registered."""
        with self._lock:
            return self._kinds.pop((group, version, kind), None) is not None

    # ----- Query Methods -----

    def get(self, group: str, version: str, kind: str) -> KindSpec | None:
        with self._lock:
            return self._kinds.get((group, version, kind))

    def has(self, group: str, version: str, kind: str) -> bool:
        with self._lock:
            return (group, version, kind) in self._kinds

    def lookup(self, doc: Document) -> KindSpec | None:
        """Return the KindSpec for a document's group, version and kind, if known."""
        return self.get(doc.group, doc.version, doc.kind)

    def list(self) -> list[KindSpec]:
        """Snapshot of registered specs, sorted by (group, version, kind)."""
        with self._lock:
            specs = list(self._kinds.values())
        return sorted(specs, key=lambda s: s.gvk)

    def __iter__(self) -> Iterator[KindSpec]:
        return iter(self.list())

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._kinds)


_CORE_KINDS: list[dict[str, Any]] = [
    {"group": "", "version": "v1", "kind": "Namespace", "namespaced": False},
    {"group": "", "version": "v1", "kind": "ConfigMap"},
    {"group": "", "version": "v1", "kind": "Secret"},
    {"group": "", "version": "v1", "kind": "Pod", "required_keys": ("spec.containers",)},
    {"group": "", "version": "v1", "kind": "Service", "required_keys": ("spec",)},
    {"group": "", "version": "v1", "kind": "ReplicationController", "required_keys": ("spec",)},
    {"group": "apps", "version": "v1", "kind": "Deployment", "required_keys": ("spec.selector", "spec.template")},
]


def default_scheme() -> Scheme:
    """Return a new Scheme populated with common core kinds."""
    return Scheme([KindSpec(**entry) for entry in _CORE_KINDS])
