"""Cross-platform path algebra for loader requests and output names.

Paths coming from a build can be POSIX paths, Windows drive-letter paths or
UNC shares regardless of the host OS. Every path is classified into one of
these root families before anything is made relative, and two paths are only
relativized when they share the same root; otherwise callers keep the
absolute path.

Examples:
    >>> classify_path("C:\\\\app\\\\a.js")
    PathRoot(kind=<PathKind.DRIVE: 'drive'>, key='c:')
    >>> relative_path("/path/to/thing", "/path/to/module/a.js")
    '../module/a.js'
    >>> relative_path("D:\\\\app", "C:\\\\app\\\\a.js") is None
    True
"""

from __future__ import annotations

import ntpath
import posixpath
import re
from dataclasses import dataclass
from enum import Enum
from types import ModuleType

_DRIVE_ROOT = re.compile(r"^([A-Za-z]):[\\/]")
_SEPARATORS = re.compile(r"[\\/]+")


class PathKind(str, Enum):
    RELATIVE = "relative"
    POSIX = "posix"
    DRIVE = "drive"
    UNC = "unc"


@dataclass(frozen=True)
class PathRoot:
    kind: PathKind
    key: str = ""

    @property
    def is_absolute(self) -> bool:
        return self.kind is not PathKind.RELATIVE


_RELATIVE = PathRoot(PathKind.RELATIVE)


def _unc_key(path: str) -> str:
    parts = [p for p in _SEPARATORS.split(path[2:]) if p]
    if parts and parts[0] in ("?", "."):
        # Device namespace: \\?\UNC\host\share\... or \\?\C:\...
        if len(parts) > 1 and parts[1].upper() == "UNC":
            parts = parts[:4]
        else:
            parts = parts[:2]
    else:
        parts = parts[:2]
    return "\\".join(parts).lower()


def classify_path(path: str) -> PathRoot:
    """Classify ``path`` into its root family.

    - ``X:\\`` or ``X:/`` prefix: DRIVE, keyed by the lowercased drive
    - two leading separators with at least one backslash: UNC, keyed by
      host and share
    - leading ``/``: POSIX
    - anything else, including ``C:`` and ``C:foo``: RELATIVE
    """
    match = _DRIVE_ROOT.match(path)
    if match:
        return PathRoot(PathKind.DRIVE, match.group(1).lower() + ":")
    head = path[:2]
    if len(head) == 2 and set(head) <= {"\\", "/"} and "\\" in head:
        return PathRoot(PathKind.UNC, _unc_key(path))
    if path.startswith("/"):
        return PathRoot(PathKind.POSIX, "/")
    return _RELATIVE


def is_absolute(path: str) -> bool:
    return classify_path(path).is_absolute


def same_root(a: PathRoot, b: PathRoot) -> bool:
    """Return True when both roots are absolute and of the same family and key."""
    return a.is_absolute and a == b


def to_posix_separators(path: str) -> str:
    return path.replace("\\", "/")


def _path_lib(root: PathRoot) -> ModuleType:
    return posixpath if root.kind is PathKind.POSIX else ntpath


def relative_path(start: str, target: str) -> str | None:
    """Return ``target`` relative to directory ``start`` with forward slashes.

    Args:
        start: Absolute directory to compute the path from
        target: Absolute path to reach

    Returns:
        Relative path using ``..`` segments (``.`` when both are the same
        directory), or None when either path is relative or the two paths do
        not share a root
    """
    start_root = classify_path(start)
    target_root = classify_path(target)
    if not same_root(start_root, target_root):
        return None
    lib = _path_lib(target_root)
    try:
        rel = lib.relpath(target, start)
    except ValueError:
        # ntpath disagrees on the root, e.g. for unusual device paths
        return None
    return to_posix_separators(rel)


__all__ = [
    "PathKind",
    "PathRoot",
    "classify_path",
    "is_absolute",
    "relative_path",
    "same_root",
    "to_posix_separators",
]
