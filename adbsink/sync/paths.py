"""Relative path model shared by listing, diffing and reconciliation.

A :class:`RelativePath` is a tuple of segments below a sync root. Ordering is
the ordering of the segment tuples: segments compare by code point (the same
order as their UTF-8 bytes) and a path sorts directly before its descendants.
A sorted listing is therefore in pre-order, which the diff engine relies on.
"""

import posixpath
import re
from dataclasses import dataclass
from typing import Union

_SEPARATORS = re.compile(r"[\\/]+")


@dataclass(frozen=True, order=True)
class RelativePath:
    """Normalized path relative to a sync root."""

    parts: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for part in self.parts:
            if not part or part in (".", "..") or "/" in part:
                raise ValueError(f"Invalid path segment: {part!r}")

    @classmethod
    def parse(cls, text: str) -> "RelativePath":
        """Build a RelativePath from a slash or backslash separated string.

        Empty and "." segments are dropped; ".." is rejected.

        Examples:
            >>> RelativePath.parse("/a//b/").parts
            ('a', 'b')
            >>> RelativePath.parse("a\\\\b").as_posix()
            'a/b'
        """
        parts = tuple(
            part for part in _SEPARATORS.split(text) if part and part != "."
        )
        if ".." in parts:
            raise ValueError(f"Parent references are not allowed: {text!r}")
        return cls(parts)

    @property
    def name(self) -> str:
        """Last segment, empty for the root."""
        return self.parts[-1] if self.parts else ""

    @property
    def parent(self) -> "RelativePath":
        """Path without its last segment (the root is its own parent)."""
        return RelativePath(self.parts[:-1])

    @property
    def depth(self) -> int:
        return len(self.parts)

    def is_root(self) -> bool:
        return not self.parts

    def child(self, name: str) -> "RelativePath":
        """Append one segment."""
        return RelativePath(self.parts + (name,))

    def is_descendant_of(self, other: "RelativePath") -> bool:
        """True if this path lies strictly below ``other``."""
        return (
            len(self.parts) > len(other.parts)
            and self.parts[: len(other.parts)] == other.parts
        )

    def as_posix(self) -> str:
        return "/".join(self.parts)

    def __str__(self) -> str:
        return self.as_posix() or "."


ROOT = RelativePath()

PathLike = Union[RelativePath, str]


def to_relative(path: PathLike) -> RelativePath:
    """Accept either a RelativePath or a string."""
    if isinstance(path, RelativePath):
        return path
    return RelativePath.parse(path)


def compare(a: RelativePath, b: RelativePath) -> int:
    """Three-way comparison: -1 if a < b, 0 if equal, 1 if a > b."""
    if a.parts < b.parts:
        return -1
    if a.parts > b.parts:
        return 1
    return 0


def join(root: str, relative: PathLike) -> str:
    """Join a POSIX root with a relative path (device-side paths)."""
    relative = to_relative(relative)
    if relative.is_root():
        return root
    return posixpath.join(root, *relative.parts)
