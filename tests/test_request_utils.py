import json

import pytest

from errors import InvalidParameters
from models import LoaderContext, LoaderEntry
from request_utils import (
    get_current_request,
    get_remaining_request,
    split_request,
    stringify_request,
    url_to_request,
)

# Query strings that contain paths and question marks must survive untouched
PARAM_QUERY = "?questionMark?posix=path/to/thing&win=path\\to\\thing"
JSON_QUERY = "?" + json.dumps({"questionMark": "?", "posix": "path/to/thing", "win": "path\\to\\file"})


def s(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


@pytest.mark.parametrize(
    "context, request_, expected",
    [
        (None, "./a.js", "./a.js"),
        (None, ".\\a.js", "./a.js"),
        (None, "./a/b.js", "./a/b.js"),
        (None, ".\\a\\b.js", "./a/b.js"),
        (None, "module", "module"),
        (None, "module/a.js", "module/a.js"),
        (None, "module\\a.js", "module/a.js"),
        (None, "./a.js" + PARAM_QUERY, "./a.js" + PARAM_QUERY),
        (None, "./a.js" + JSON_QUERY, "./a.js" + JSON_QUERY),
        (None, "module" + PARAM_QUERY, "module" + PARAM_QUERY),
        (None, "module" + JSON_QUERY, "module" + JSON_QUERY),
        ("/path/to", "/path/to/module/a.js", "./module/a.js"),
        ("C:\\path\\to\\", "C:\\path\\to\\module\\a.js", "./module/a.js"),
        ("/path/to/thing", "/path/to/module/a.js", "../module/a.js"),
        ("/path/to", "\\path\\to\\a.js", "./a.js"),
        ("C:\\path\\to\\thing", "C:\\path\\to\\module\\a.js", "../module/a.js"),
        ("\\\\A\\path\\to\\thing", "\\\\A\\path\\to\\module\\a.js", "../module/a.js"),
        ("D:\\path\\to\\thing", "C:\\path\\to\\module\\a.js", "C:\\path\\to\\module\\a.js"),
        ("\\\\A\\path\\to\\thing", "\\\\B\\path\\to\\module\\a.js", "\\\\B\\path\\to\\module\\a.js"),
        ("/path/to", "/path/to/module/a.js" + PARAM_QUERY, "./module/a.js" + PARAM_QUERY),
        ("C:\\path\\to\\", "C:\\path\\to\\module\\a.js" + PARAM_QUERY, "./module/a.js" + PARAM_QUERY),
        (None, "./a.js!./b.js!./c.js", "./a.js!./b.js!./c.js"),
        (None, "a/b.js!c/d.js!e/f.js!g", "a/b.js!c/d.js!e/f.js!g"),
        (
            None,
            "!".join(["a/b.js" + PARAM_QUERY, "c/d.js" + JSON_QUERY, "e/f.js"]),
            "!".join(["a/b.js" + PARAM_QUERY, "c/d.js" + JSON_QUERY, "e/f.js"]),
        ),
        (
            "/path/to",
            "!".join(["/a/b.js" + PARAM_QUERY, "c/d.js" + JSON_QUERY, "/path/to/e/f.js"]),
            "!".join(["../../a/b.js" + PARAM_QUERY, "c/d.js" + JSON_QUERY, "./e/f.js"]),
        ),
        (
            "C:\\path\\to\\",
            "!".join(["C:\\a\\b.js" + PARAM_QUERY, "c\\d.js" + JSON_QUERY, "C:\\path\\to\\e\\f.js"]),
            "!".join(["../../a/b.js" + PARAM_QUERY, "c/d.js" + JSON_QUERY, "./e/f.js"]),
        ),
    ],
)
def test_stringify_request(context, request_, expected):
    """Requests become portable string literals, segment by segment."""
    assert stringify_request(context, request_) == s(expected)


def test_stringify_absolute_without_context_is_unchanged():
    """Absolute paths with nothing to relate them to are kept as written."""
    assert stringify_request(None, "/abs/a.js") == s("/abs/a.js")
    assert stringify_request(None, "C:\\abs\\a.js") == s("C:\\abs\\a.js")
    assert stringify_request("relative/ctx", "/abs/a.js") == s("/abs/a.js")


def test_stringify_posix_context_windows_request():
    """A POSIX context never relativizes a drive-letter path."""
    assert stringify_request("/path/to", "C:\\path\\to\\a.js") == s("C:\\path\\to\\a.js")


def test_stringify_rooted_backslash_path():
    """A backslash-rooted path is relativized against a POSIX context only."""
    assert stringify_request("/path/to", "\\path\\to\\module\\a.js") == s("./module/a.js")
    assert stringify_request("/other", "\\path\\a.js") == s("../path/a.js")
    assert stringify_request("C:\\path\\to", "\\path\\to\\a.js") == s("\\path\\to\\a.js")
    assert stringify_request(None, "\\path\\to\\a.js") == s("\\path\\to\\a.js")


def test_stringify_same_directory():
    """A request equal to the context becomes ./"""
    assert stringify_request("/path/to", "/path/to") == s("./")


def test_stringify_keeps_empty_segments():
    """Empty chain segments are preserved."""
    assert stringify_request(None, "!!./a.js") == s("!!./a.js")
    assert stringify_request(None, "") == s("")


def test_stringify_escapes_literal():
    """Quotes and backslashes in queries are escaped in the literal."""
    literal = stringify_request(None, './a.js?x="1"\\y')
    assert literal == '"./a.js?x=\\"1\\"\\\\y"'
    assert json.loads(literal) == './a.js?x="1"\\y'


def test_stringify_keeps_non_ascii():
    """Non-ASCII characters are written as-is."""
    assert stringify_request(None, "./ünïcode.js") == '"./ünïcode.js"'


def test_split_request():
    """Segments split at the first question mark only."""
    segments = split_request("style!css?modules?x!./a.css")
    assert [(seg.path_part, seg.query_part) for seg in segments] == [
        ("style", ""),
        ("css", "?modules?x"),
        ("./a.css", ""),
    ]


@pytest.mark.parametrize(
    "args, expected",
    [
        (("path/to/thing",), "./path/to/thing"),
        (("./path/to/thing",), "./path/to/thing"),
        (("~path/to/thing",), "path/to/thing"),
        (("some/other/stuff/and/then~path/to/thing",), "path/to/thing"),
        (("./some/other/stuff/and/then~path/to/thing",), "path/to/thing"),
        (("path/to/thing", "root/dir"), "./path/to/thing"),
        (("./path/to/thing", "root/dir"), "./path/to/thing"),
        (("/path/to/thing", "root/dir"), "root/dir/path/to/thing"),
        (("/path/to/thing", True), "/path/to/thing"),
        (("C:\\path\\to\\thing",), "C:\\path\\to\\thing"),
        (("\\\\?\\UNC\\ComputerName\\path\\to\\thing",), "\\\\?\\UNC\\ComputerName\\path\\to\\thing"),
        (("/path/to/thing", "~"), "path/to/thing"),
        (("/path/to/thing", "~module"), "module/path/to/thing"),
        (("/path/to/thing", "~module/"), "module/path/to/thing"),
        (("a:b-not-\\window-path",), "./a:b-not-\\window-path"),
        (("",), ""),
        (("../up/thing",), "../up/thing"),
    ],
)
def test_url_to_request(args, expected):
    """URLs turn into relative or module requests."""
    assert url_to_request(*args) == expected


def test_url_to_request_rejects_other_roots():
    """Roots other than strings and booleans are an error."""
    with pytest.raises(InvalidParameters, match="Unexpected parameters"):
        url_to_request("/path/to/thing", 1)


def test_current_and_remaining_request(loader_context):
    """Requests are built from the running loader onwards."""
    assert get_current_request(loader_context) == "/loaders/css.js?modules!/loaders/postcss.js!/app/src/index.css?inline"
    assert get_remaining_request(loader_context) == "/loaders/postcss.js!/app/src/index.css?inline"


def test_last_loader_remaining_request_is_resource():
    """After the last loader only the resource remains."""
    ctx = LoaderContext(resource="/a.js", loaders=[LoaderEntry(request="/l.js")], loader_index=0)
    assert get_current_request(ctx) == "/l.js!/a.js"
    assert get_remaining_request(ctx) == "/a.js"


def test_explicit_requests_win(loader_context):
    """Precomputed requests on the context are returned as-is."""
    ctx = loader_context.model_copy(update={"current_request": "cur", "remaining_request": "rem"})
    assert get_current_request(ctx) == "cur"
    assert get_remaining_request(ctx) == "rem"
