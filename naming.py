"""Output-name interpolation for loader resources.

Provides interpolate_name(), which expands bracket tokens in a name pattern
such as ``js/[name].[contenthash:8].[ext]`` using the resource path, the
resource content and digests of that content.

Tokens are resolved one at a time by an ordered list of resolvers: built-in
path tokens, digest tokens, the emoji token, regexp capture groups, the
resource's custom resolver, and finally pass-through. Substituted text is
never scanned again.
"""

from __future__ import annotations

import hashlib
import logging
import posixpath
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, NamedTuple

from errors import InvalidContent, InvalidParameters
from models import HashSpec, ResourceDescriptor, ValidationError
from paths import relative_path, to_posix_separators
from utils.emoji_utils import encode_emoji
from utils.hash_utils import get_hash_digest

logger = logging.getLogger(__name__)

DEFAULT_NAME_PATTERN = "[hash].[ext]"

_TOKEN = re.compile(r"\[([^\[\]]+)\]")
_PARENT_SEGMENT = re.compile(r"\.\.(/)?")

_PATH_TOKENS = frozenset({"ext", "name", "path", "folder"})
_HASH_TOKENS = frozenset({"hash", "contenthash"})
_DIGEST_ALGORITHMS = frozenset(
    name.lower() for name in hashlib.algorithms_available if not name.lower().startswith("shake_")
)


@dataclass(frozen=True)
class Token:
    """A bracketed token, e.g. ``[sha512:hash:base64:7]``."""

    text: str
    name: str
    args: tuple[str, ...]
    algorithm: str | None = None

    @classmethod
    def parse(cls, text: str, body: str) -> "Token":
        parts = body.split(":")
        if len(parts) > 1 and parts[1] in _HASH_TOKENS:
            return cls(text=text, name=parts[1], args=tuple(parts[2:]), algorithm=parts[0])
        return cls(text=text, name=parts[0], args=tuple(parts[1:]))

    @property
    def is_digest(self) -> bool:
        return self.name in _HASH_TOKENS or self.name in _DIGEST_ALGORITHMS

    @property
    def needs_content(self) -> bool:
        return self.is_digest or _emoji_count(self) is not None


@dataclass(frozen=True)
class PathParts:
    ext: str = "bin"
    name: str = "file"
    path: str = ""
    folder: str = ""


@dataclass(frozen=True)
class Scope:
    resource: ResourceDescriptor
    options: Mapping[str, Any]
    parts: PathParts
    content: bytes | None
    groups: tuple[str, ...] | None


class Resolver(NamedTuple):
    name: str
    applies: Callable[[Token, Scope], bool]
    resolve: Callable[[Token, Scope], str]


def _split_resource_path(resource_path: str) -> tuple[str, str]:
    """Split into (directory including trailing separator, file name)."""
    cut = max(resource_path.rfind("/"), resource_path.rfind("\\"))
    return resource_path[: cut + 1], resource_path[cut + 1 :]


def _directory_token(directory: str, context: str | None) -> str:
    if context is not None and directory:
        rel = relative_path(context, directory.rstrip("/\\") or directory)
        if rel is not None:
            directory = "" if rel == "." else rel + "/"
    directory = _PARENT_SEGMENT.sub(r"_\1", to_posix_separators(directory))
    return "" if len(directory) == 1 else directory


def path_parts(resource_path: str, context: str | None = None) -> PathParts:
    """Compute the values of the [ext], [name], [path] and [folder] tokens.

    Examples:
        >>> path_parts("/path/to/file.exe")
        PathParts(ext='exe', name='file', path='/path/to/', folder='to')
        >>> path_parts("/app/dir/file.png", context="/app").path
        'dir/'
    """
    if not resource_path:
        return PathParts()

    directory, filename = _split_resource_path(resource_path)
    stem, dot_ext = posixpath.splitext(filename)
    directory = _directory_token(directory, context)
    return PathParts(
        ext=dot_ext[1:].lower() or "bin",
        name=stem or "file",
        path=directory,
        folder=posixpath.basename(directory.rstrip("/")),
    )


def _hash_spec(token: Token) -> HashSpec:
    algorithm = token.algorithm or (token.name if token.name not in _HASH_TOKENS else "md5")
    encoding = "hex"
    length: int | None = None
    for arg in token.args:
        if arg.isdecimal():
            length = int(arg) or None
        elif arg:
            encoding = arg
    try:
        return HashSpec(algorithm=algorithm, encoding=encoding, length=length)
    except ValidationError as exc:
        raise InvalidParameters(f"Invalid digest token {token.text}") from exc


def _resolve_hash(token: Token, scope: Scope) -> str:
    spec = _hash_spec(token)
    return get_hash_digest(scope.content, spec.algorithm, spec.encoding, spec.length)


def _emoji_count(token: Token) -> int | None:
    """Symbol count of a well-formed [emoji] or [emoji:N] token, else None."""
    if token.name != "emoji" or len(token.args) > 1:
        return None
    if not token.args:
        return 1
    if not token.args[0].isdecimal():
        return None
    # [emoji:0] means the default single symbol
    return int(token.args[0]) or 1


def _resolve_emoji(token: Token, scope: Scope) -> str:
    return encode_emoji(scope.content, _emoji_count(token))


def _resolve_group(token: Token, scope: Scope) -> str:
    return scope.groups[int(token.name)]


def _resolve_custom(token: Token, scope: Scope) -> str:
    return scope.resource.custom_interpolate(token.text, token.name, scope.options)


def _missing_content(token: Token, scope: Scope) -> str:
    raise InvalidContent(f"Token {token.text} needs options['content'] but none was given")


def _passthrough(token: Token, scope: Scope) -> str:
    logger.debug("Leaving unrecognized token %s untouched", token.text)
    return token.text


RESOLVERS: tuple[Resolver, ...] = (
    Resolver(
        "path",
        lambda t, s: t.name in _PATH_TOKENS and not t.args,
        lambda t, s: getattr(s.parts, t.name),
    ),
    Resolver("hash", lambda t, s: t.is_digest and s.content is not None, _resolve_hash),
    Resolver(
        "emoji",
        lambda t, s: _emoji_count(t) is not None and s.content is not None,
        _resolve_emoji,
    ),
    Resolver(
        "regexp",
        lambda t, s: not t.args and t.name.isdecimal() and s.groups is not None and int(t.name) < len(s.groups),
        _resolve_group,
    ),
    Resolver("custom", lambda t, s: s.resource.custom_interpolate is not None, _resolve_custom),
    Resolver("content", lambda t, s: t.needs_content and s.content is None, _missing_content),
    Resolver("passthrough", lambda t, s: True, _passthrough),
)


def _coerce_resource(resource: ResourceDescriptor | Mapping[str, Any] | str | None) -> ResourceDescriptor:
    if resource is None:
        return ResourceDescriptor()
    if isinstance(resource, ResourceDescriptor):
        return resource
    if isinstance(resource, str):
        return ResourceDescriptor(path=resource)
    if isinstance(resource, Mapping):
        try:
            return ResourceDescriptor.model_validate(dict(resource))
        except ValidationError as exc:
            raise InvalidParameters(f"Invalid resource descriptor: {exc}") from exc
    raise InvalidParameters(f"Unsupported resource type {type(resource).__name__}")


def _coerce_content(content: Any) -> bytes | None:
    if content is None:
        return None
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    raise InvalidParameters(f"options['content'] must be bytes or str, got {type(content).__name__}")


def _regexp_groups(regexp: Any, resource_path: str) -> tuple[str, ...] | None:
    if not regexp or not resource_path:
        return None
    try:
        match = re.search(regexp, resource_path)
    except re.error as exc:
        raise InvalidParameters(f"Invalid regexp option {regexp!r}: {exc}") from exc
    if match is None:
        return None
    return (match.group(0),) + tuple(group or "" for group in match.groups())


def interpolate_name(
    pattern: str | Callable[[str], str] | None,
    resource: ResourceDescriptor | Mapping[str, Any] | str | None = None,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Expand the bracket tokens of a name pattern for a resource.

    Args:
        pattern: Name pattern, or a callable receiving the resource path and
            returning one. Empty patterns mean ``[hash].[ext]``.
        resource: ResourceDescriptor, a mapping with its fields, or a bare path
        options: Interpolation options. ``content`` (bytes or str) feeds the
            digest and emoji tokens, ``context`` makes ``[path]`` relative,
            ``regexp`` supplies ``[0]``, ``[1]``, ... from the resource path.
            Everything is passed to the custom resolver unchanged.

    Returns:
        The interpolated name. Tokens with no resolver are left as written.

    Raises:
        InvalidContent: A digest or emoji token is used without content and
            no custom resolver handles it
        InvalidParameters: The resource, content or regexp option is malformed
        UnsupportedAlgorithm, InvalidEncoding: Raised by the digest encoder

    Examples:
        >>> interpolate_name("[name].[ext]", "/app/js/main.JS")
        'main.js'
        >>> interpolate_name("[hash:6].[ext]", "/app/page.html", {"content": "test content"})
        '9473fd.html'
    """
    options = options or {}
    descriptor = _coerce_resource(resource)

    if callable(pattern):
        pattern = pattern(descriptor.path)
    pattern = pattern or DEFAULT_NAME_PATTERN

    scope = Scope(
        resource=descriptor,
        options=options,
        parts=path_parts(descriptor.path, options.get("context")),
        content=_coerce_content(options.get("content")),
        groups=_regexp_groups(options.get("regexp"), descriptor.path),
    )

    def substitute(match: re.Match[str]) -> str:
        token = Token.parse(match.group(0), match.group(1))
        for resolver in RESOLVERS:
            if resolver.applies(token, scope):
                return resolver.resolve(token, scope)
        return token.text

    return _TOKEN.sub(substitute, pattern)


__all__ = ["DEFAULT_NAME_PATTERN", "RESOLVERS", "PathParts", "Token", "interpolate_name", "path_parts"]
