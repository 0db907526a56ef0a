from __future__ import annotations

import json
import re
from typing import Any, Mapping
from urllib.parse import unquote

import yaml

from errors import InvalidParameters
from models import LoaderContext

_SPECIAL_VALUES: dict[str, Any] = {"null": None, "true": True, "false": False}
_ARG_SEPARATOR = re.compile(r"[,&]")
_SINGLE_QUOTED_ESCAPES = re.compile(r'\\.|"')


def _parse_object(body: str) -> dict[str, Any]:
    # YAML flow mappings accept JSON as well as unquoted keys and values
    try:
        parsed = yaml.safe_load(body)
    except yaml.YAMLError as exc:
        raise InvalidParameters(f"Query object is not valid: {exc}") from exc
    if not isinstance(parsed, dict):
        raise InvalidParameters("Query object must be a mapping")
    return parsed


def parse_query(query: str | Mapping[str, Any]) -> dict[str, Any]:
    """Parse a loader query string into a dict of options.

    Args:
        query: ``?name=value&flag`` style string, ``?{...}`` object literal, or
            an options mapping (returned as a shallow copy)

    Returns:
        Parsed options. Values are URL-decoded strings, except ``true``,
        ``false`` and ``null`` which become True, False and None. ``+flag`` and
        ``flag`` set True, ``-flag`` sets False, ``name[]=v`` collects a list.

    Raises:
        InvalidParameters: If the string does not start with ``?`` or the
            object literal cannot be parsed into a mapping

    Examples:
        >>> parse_query("?sweet=true&name=cheesecake&slices=8&delicious&warm=false")
        {'sweet': True, 'name': 'cheesecake', 'slices': '8', 'delicious': True, 'warm': False}
        >>> parse_query("?-%3d")
        {'=': False}
    """
    if isinstance(query, Mapping):
        return dict(query)
    if not isinstance(query, str) or not query.startswith("?"):
        raise InvalidParameters("A valid query string passed to parse_query should begin with '?'")

    body = query[1:]
    if not body:
        return {}
    if body.startswith("{") and body.endswith("}"):
        return _parse_object(body)

    result: dict[str, Any] = {}
    for arg in _ARG_SEPARATOR.split(body):
        name, eq, raw_value = arg.partition("=")
        if eq:
            value = unquote(raw_value)
            value = _SPECIAL_VALUES.get(value, value)
            if name.endswith("[]"):
                key = unquote(name[:-2])
                if not isinstance(result.get(key), list):
                    result[key] = []
                result[key].append(value)
            else:
                result[unquote(name)] = value
        elif arg.startswith("-"):
            result[unquote(arg[1:])] = False
        elif arg.startswith("+"):
            result[unquote(arg[1:])] = True
        else:
            result[unquote(arg)] = True
    return result


def get_options(loader_context: LoaderContext) -> dict[str, Any] | None:
    """Return the loader's options, or None when it has no query."""
    query = loader_context.query
    if isinstance(query, str) and not query:
        return None
    return parse_query(query)


def get_loader_config(loader_context: LoaderContext, default_config_key: str | None = None) -> dict[str, Any]:
    """Merge query options over the build-wide options object for this loader.

    The options object is looked up in ``loader_context.options`` under the
    query's ``config`` value, falling back to ``default_config_key``. Query
    values win over values from the options object.
    """
    query = get_options(loader_context) or {}
    config_key = query.pop("config", None) or default_config_key
    if not config_key:
        return query
    base = loader_context.options.get(str(config_key)) or {}
    if not isinstance(base, Mapping):
        raise InvalidParameters(f"options[{config_key!r}] must be a mapping")
    return {**base, **query}


def parse_string(value: str) -> str:
    """Decode a quoted string literal, or return ``value`` unchanged if it is not one.

    Accepts JSON double-quoted strings, single-quoted strings using JSON
    escapes, and bare text containing JSON escapes.

    Examples:
        >>> parse_string("'escaped with single \\"'")
        'escaped with single "'
        >>> parse_string("invalid \\"' string")
        'invalid "\\' string'
    """
    try:
        if value.startswith('"'):
            parsed = json.loads(value)
        elif len(value) >= 2 and value.startswith("'") and value.endswith("'"):
            escaped = _SINGLE_QUOTED_ESCAPES.sub(lambda m: '\\"' if m.group(0) == '"' else m.group(0), value)
            return parse_string('"' + escaped[1:-1] + '"')
        else:
            parsed = json.loads('"' + value + '"')
    except json.JSONDecodeError:
        return value
    return parsed if isinstance(parsed, str) else value


__all__ = ["get_loader_config", "get_options", "parse_query", "parse_string"]
