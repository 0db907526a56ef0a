"""Loader request helpers.

A request is a ``!``-delimited chain of loader requests ending with the
resource, each optionally followed by a query string::

    ./loader.js?{"mode":"a"}!C:\\app\\src\\index.js?inline

stringify_request() turns such a chain into a JSON string literal that can be
embedded in generated code: absolute paths become ``./`` or ``../`` paths
relative to the context directory, Windows separators become ``/`` and query
strings are carried through untouched.
"""

from __future__ import annotations

import json
import logging
import re

from errors import InvalidParameters
from models import LoaderContext, RequestSegment
from paths import classify_path, relative_path, same_root, to_posix_separators

logger = logging.getLogger(__name__)

CHAIN_DELIMITER = "!"

_WINDOWS_ABSOLUTE_URL = re.compile(r"^(?:[a-zA-Z]:\\|\\\\)")
_RELATIVE_URL = re.compile(r"^\.\.?/")
_MODULE_REQUEST = re.compile(r"^[^?]*~")
_ROOTED_BACKSLASH = re.compile(r"^\\(?![\\/])")
_MODULE_ROOT_TRAILING = re.compile(r"([^~/])$")


def split_request(request: str) -> list[RequestSegment]:
    """Split a request chain into segments, keeping empty ones.

    Examples:
        >>> [s.render() for s in split_request("style!css?modules!./a.css")]
        ['style', 'css?modules', './a.css']
    """
    segments = []
    for part in request.split(CHAIN_DELIMITER):
        path_part, mark, query = part.partition("?")
        segments.append(RequestSegment(path_part=path_part, query_part=mark + query))
    return segments


def _portable_path(path: str, context: str | None) -> str:
    candidate = path
    if _ROOTED_BACKSLASH.match(path):
        # \path\to\a.js is rooted on the current drive; compare it as /path/to/a.js
        candidate = to_posix_separators(path)
    root = classify_path(candidate)
    if not root.is_absolute:
        return to_posix_separators(path)

    rel = None
    if context and same_root(root, classify_path(context)):
        rel = relative_path(context, candidate)
    if rel is None:
        logger.debug("Keeping absolute request path %s (context %r has no matching root)", path, context)
        return path

    if rel == ".":
        return "./"
    if rel == ".." or rel.startswith("../"):
        return rel
    # Without ./ the request would be looked up in the module directories
    return "./" + rel


def stringify_request(context: str | None, request: str) -> str:
    """Return ``request`` as a portable JSON string literal.

    Args:
        context: Absolute directory that absolute paths are made relative to,
            or None to leave absolute paths alone
        request: ``!``-delimited loader request chain

    Returns:
        Double-quoted string literal, e.g. ``'"./module/a.js"'``

    Examples:
        >>> stringify_request("/path/to", "/path/to/module/a.js")
        '"./module/a.js"'
        >>> stringify_request("/path/to/thing", "/path/to/module/a.js?x=/y")
        '"../module/a.js?x=/y"'
        >>> stringify_request(None, ".\\\\a.js")
        '"./a.js"'
    """
    parts = [segment.render(_portable_path(segment.path_part, context)) for segment in split_request(request)]
    return json.dumps(CHAIN_DELIMITER.join(parts), ensure_ascii=False)


def url_to_request(url: str, root: str | bool | None = None) -> str:
    """Convert a URL found in a stylesheet or template into a module request.

    Args:
        url: URL as written in the source
        root: How to treat root-relative URLs (``/…``): a directory or module
            prefix to join them to (module prefixes start with ``~``), True to
            keep them as-is, or None/False for the default relative handling

    Returns:
        Request string. ``~name`` URLs become module requests (``name``),
        other relative URLs are prefixed with ``./``.

    Raises:
        InvalidParameters: If root is neither a string nor a boolean

    Examples:
        >>> url_to_request("path/to/thing")
        './path/to/thing'
        >>> url_to_request("~path/to/thing")
        'path/to/thing'
        >>> url_to_request("/path/to/thing", "~module")
        'module/path/to/thing'
    """
    if url == "":
        return ""

    if _WINDOWS_ABSOLUTE_URL.match(url):
        request = url
    elif root is not None and root is not False and url.startswith("/"):
        if isinstance(root, bool):
            request = url
        elif isinstance(root, str):
            if _MODULE_REQUEST.match(root):
                request = _MODULE_ROOT_TRAILING.sub(r"\1/", root) + url[1:]
            else:
                request = root + url
        else:
            raise InvalidParameters(f"Unexpected parameters to url_to_request: url = {url!r}, root = {root!r}")
    elif _RELATIVE_URL.match(url):
        request = url
    else:
        request = "./" + url

    return _MODULE_REQUEST.sub("", request, count=1)


def get_current_request(loader_context: LoaderContext) -> str:
    """Return the request of the running loader and everything after it."""
    if loader_context.current_request is not None:
        return loader_context.current_request
    requests = [entry.request for entry in loader_context.loaders[loader_context.loader_index :]]
    return CHAIN_DELIMITER.join(requests + [loader_context.resource])


def get_remaining_request(loader_context: LoaderContext) -> str:
    """Return the requests of the loaders after the running one, plus the resource."""
    if loader_context.remaining_request is not None:
        return loader_context.remaining_request
    requests = [entry.request for entry in loader_context.loaders[loader_context.loader_index + 1 :]]
    return CHAIN_DELIMITER.join(requests + [loader_context.resource])


__all__ = [
    "CHAIN_DELIMITER",
    "get_current_request",
    "get_remaining_request",
    "split_request",
    "stringify_request",
    "url_to_request",
]
