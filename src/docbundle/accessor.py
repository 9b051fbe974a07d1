"""Key-path resolution against a document's data tree."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Union

from docbundle.errors import DocumentDataKeyNotFoundError, DocumentMalformedError, InvalidInputError
from docbundle.values import ValueKind, freeze_copy, kind_of

if TYPE_CHECKING:
    from docbundle.document import Document

__all__ = ["KeyPath", "DataAccessor", "get_value"]

Segment = Union[str, int]
PathLike = Union["KeyPath", str, Sequence[Segment]]

_INDEX_RE = re.compile(r"-?\d+")
_MISSING: Any = object()


class KeyPath(tuple):
    """An immutable sequence of path segments.

    ``str`` segments are map keys and ``int`` segments are sequence positions.
    The text form joins keys with dots and renders positions in brackets::

        KeyPath.parse("spec.template.spec.containers[0].image")
    """

    __slots__ = ()

    def __new__(cls, segments: Iterable[Segment] = ()) -> KeyPath:
        items = tuple(segments)
        for seg in items:
            if isinstance(seg, bool) or not isinstance(seg, (str, int)):
                raise InvalidInputError(message=f"Invalid key path segment {seg!r}: must be str or int")
        return super().__new__(cls, items)

    @classmethod
    def parse(cls, path: PathLike) -> KeyPath:
        """Coerce a KeyPath, dotted string, or segment sequence into a KeyPath.

        Raises:
            InvalidInputError: If a dotted string is malformed.
        """
        if isinstance(path, KeyPath):
            return path
        if isinstance(path, str):
            return cls(_parse_text(path))
        if isinstance(path, (list, tuple)):
            return cls(path)
        raise InvalidInputError(message=f"Invalid key path {path!r}: expected a string or a sequence of segments")

    def child(self, segment: Segment) -> KeyPath:
        return KeyPath((*self, segment))

    def __str__(self) -> str:
        out: list[str] = []
        for seg in self:
            if isinstance(seg, int):
                out.append(f"[{seg}]")
            else:
                out.append(f".{seg}" if out else seg)
        return "".join(out)

    def __repr__(self) -> str:
        return f"KeyPath({str(self)!r})"


def _parse_text(text: str) -> list[Segment]:
    segments: list[Segment] = []
    pos = 0
    length = len(text)
    need_key = False
    while pos < length:
        ch = text[pos]
        if ch == "[":
            if need_key:
                raise InvalidInputError(message=f"Invalid key path '{text}': empty segment before '['")
            end = text.find("]", pos)
            if end == -1:
                raise InvalidInputError(message=f"Invalid key path '{text}': unterminated '['")
            raw = text[pos + 1 : end].strip()
            if not _INDEX_RE.fullmatch(raw):
                raise InvalidInputError(message=f"Invalid key path '{text}': index '{raw}' is not an integer")
            segments.append(int(raw))
            pos = end + 1
        elif ch == ".":
            if need_key or not segments:
                raise InvalidInputError(message=f"Invalid key path '{text}': empty segment")
            need_key = True
            pos += 1
        elif ch == "]":
            raise InvalidInputError(message=f"Invalid key path '{text}': unexpected ']'")
        else:
            if segments and not need_key:
                raise InvalidInputError(message=f"Invalid key path '{text}': missing '.' before '{text[pos:]}'")
            end = pos
            while end < length and text[end] not in ".[]":
                end += 1
            segments.append(text[pos:end])
            need_key = False
            pos = end
    if need_key:
        raise InvalidInputError(message=f"Invalid key path '{text}': trailing '.'")
    return segments


def _step(current: Any, segment: Segment) -> Any:
    """Resolve one segment, returning _MISSING when it cannot be resolved."""
    if isinstance(segment, str):
        if isinstance(current, Mapping) and segment in current:
            return current[segment]
        return _MISSING
    if isinstance(current, (list, tuple)) and 0 <= segment < len(current):
        return current[segment]
    return _MISSING


class DataAccessor:
    """Resolves key paths against the data tree of a Document."""

    def _resolve(self, doc: Document, path: PathLike) -> tuple[KeyPath, Any]:
        """Walk ``path`` and return ``(parsed_path, value)`` without copying.

        ``value`` is ``_MISSING`` if any segment fails to resolve.
        """
        key_path = KeyPath.parse(path)
        current = doc.raw_data
        for segment in key_path:
            current = _step(current, segment)
            if current is _MISSING:
                break
        return key_path, current

    def get(self, doc: Document, path: PathLike, default: Any = _MISSING) -> Any:
        """Return a copy of the value at ``path``.

        The empty path returns the whole data tree.

        Raises:
            DocumentDataKeyNotFoundError: If a key is missing, an index is out of
                range, or a segment does not fit the value's shape, and no
                ``default`` was given. The error carries the full requested path.
        """
        key_path, value = self._resolve(doc, path)
        if value is _MISSING:
            if default is not _MISSING:
                return default
            raise DocumentDataKeyNotFoundError(doc_name=doc.name, key=str(key_path))
        return freeze_copy(value)

    def get_as(self, doc: Document, path: PathLike, kind: ValueKind) -> Any:
        """Like get(), but also require the value to be of the given kind.

        Raises:
            DocumentDataKeyNotFoundError: If the path does not resolve.
            DocumentMalformedError: If the value has a different kind.
        """
        value = self.get(doc, path)
        actual = kind_of(value)
        if actual is not kind:
            raise DocumentMalformedError(
                doc_name=doc.name,
                reason=f"value at '{KeyPath.parse(path)}' is {actual.value}, expected {kind.value}",
            )
        return value

    def has(self, doc: Document, path: PathLike) -> bool:
        _, value = self._resolve(doc, path)
        return value is not _MISSING


_default_accessor = DataAccessor()


def get_value(doc: Document, path: PathLike, default: Any = _MISSING) -> Any:
    """Shortcut for ``DataAccessor().get(doc, path, default)``."""
    return _default_accessor.get(doc, path, default)
