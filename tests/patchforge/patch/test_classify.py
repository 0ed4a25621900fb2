import textwrap

import pytest

from patchforge.errors import InvalidRequestError, VALIDATION_ERROR
from patchforge.models.diff import ADD, CONTEXT, DELETE, DiffLine, SegmentedDiff, SimpleDiff, UnifiedDiff
from patchforge.models.request import ContentPayload, DiffPayload, SearchReplacePayload
from patchforge.patch.classify import classify_diff, parse_request


# ---------- requests ----------


def test_content_request():
    req = parse_request({"path": "a.txt", "content": "hi"})
    assert req.payload == ContentPayload("hi")
    assert req.encoding == "utf8"
    assert req.mode_name == "content"


def test_search_replace_request():
    req = parse_request({"path": "a.txt", "search": "x", "replace": "y", "searchRegex": True})
    assert req.payload == SearchReplacePayload("x", "y", True)
    assert req.mode_name == "search-replace"


def test_diff_request():
    req = parse_request({"path": "a.txt", "diff": "a\n+b"})
    assert isinstance(req.payload, DiffPayload)


def test_empty_content_is_a_payload():
    req = parse_request({"path": "a.txt", "content": ""})
    assert req.payload == ContentPayload("")


@pytest.mark.parametrize(
    "params, message",
    [
        ({"path": "a.txt"}, "Must provide one of content"),
        ({"content": "x"}, "Missing required parameter: path"),
        ({"path": 3, "content": "x"}, "must be a string"),
        ({"path": "a.txt", "content": "x", "diff": "y"}, "Cannot mix modes"),
        ({"path": "a.txt", "search": "x", "diff": "y"}, "Cannot mix modes"),
        ({"path": "a.txt", "search": "x"}, "Search-replace mode requires both search and replace"),
        ({"path": "a.txt", "content": "x", "replace": "y"}, "replace is only valid together with search"),
        ({"path": "a.txt", "search": "  ", "replace": "y"}, "Empty search string"),
        ({"path": "a.txt", "content": "x", "encoding": "latin9"}, "Invalid encoding: latin9"),
        ({"path": "a.txt", "diff": "a\n+b", "encoding": "base64"}, "only supported with content"),
        ({"path": "a.txt", "search": "x", "replace": "y", "searchRegex": "yes"}, "searchRegex"),
    ],
)
def test_invalid_requests(params, message):
    with pytest.raises(InvalidRequestError, match=message) as exc:
        parse_request(params)
    assert exc.value.code == VALIDATION_ERROR


# ---------- dialects ----------


@pytest.mark.parametrize("diff", ["", "   ", "\n\n"])
def test_empty_diff(diff):
    with pytest.raises(InvalidRequestError, match="Empty diff provided"):
        classify_diff(diff)


def test_simple_diff_lines():
    dialect = classify_diff("keep\n-old\n+new\n  indented")
    assert isinstance(dialect, SimpleDiff)
    assert dialect.lines == (
        DiffLine(CONTEXT, "keep"),
        DiffLine(DELETE, "old"),
        DiffLine(ADD, "new"),
        DiffLine(CONTEXT, " indented"),
    )
    assert dialect.context_lines == ["keep", " indented"]


def test_unified_without_file_headers():
    diff = textwrap.dedent("""\
        @@ -2,3 +2,3 @@
         b
        -c
        +C
         d
    """)
    dialect = classify_diff(diff)
    assert isinstance(dialect, UnifiedDiff)
    (hunk,) = dialect.hunks
    assert (hunk.old_start, hunk.old_len, hunk.new_start, hunk.new_len) == (2, 3, 2, 3)
    assert hunk.old_lines == ["b", "c", "d"]
    assert (hunk.additions, hunk.deletions) == (1, 1)


def test_unified_with_file_headers():
    diff = textwrap.dedent("""\
        --- a/f.txt
        +++ b/f.txt
        @@ -1,3 +1,3 @@
         alpha
        -beta
        +BETA
         gamma
    """)
    dialect = classify_diff(diff)
    assert isinstance(dialect, UnifiedDiff)
    (hunk,) = dialect.hunks
    assert hunk.old_start == 1
    assert hunk.old_lines == ["alpha", "beta", "gamma"]
    assert [ln.kind for ln in hunk.lines] == [CONTEXT, DELETE, ADD, CONTEXT]


def test_unified_header_without_lengths():
    dialect = classify_diff("@@ -3 +3 @@\n-x\n+y")
    (hunk,) = dialect.hunks
    assert (hunk.old_start, hunk.old_len, hunk.new_len) == (3, 1, 1)


def test_no_newline_marker_is_ignored():
    dialect = classify_diff("@@ -1 +1 @@\n-x\n\\ No newline at end of file\n+y\n\\ No newline at end of file")
    assert [ln.text for ln in dialect.hunks[0].lines] == ["x", "y"]


def test_multi_file_diff_rejected():
    diff = textwrap.dedent("""\
        --- a/x
        +++ b/x
        @@ -1 +1 @@
        -a
        +b
        --- a/y
        +++ b/y
        @@ -1 +1 @@
        -c
        +d
    """)
    with pytest.raises(InvalidRequestError, match="only single-file diffs"):
        classify_diff(diff)


def test_hunk_headers_with_bare_at_at_are_ambiguous():
    diff = "@@ -1,2 +1,2 @@\n a\n-b\n+B\n@@\nc\n+d"
    with pytest.raises(InvalidRequestError, match="Ambiguous use of '@@'"):
        classify_diff(diff)


def test_segmented_with_dots():
    dialect = classify_diff("one\n+1.5\n...\nfour\n-five")
    assert isinstance(dialect, SegmentedDiff)
    assert dialect.separator == "..."
    assert len(dialect.segments) == 2
    assert dialect.segments[1].context_lines == ["four", "five"]


def test_segmented_with_bare_at_at():
    dialect = classify_diff("one\n+x\n@@\nthree\n+y")
    assert isinstance(dialect, SegmentedDiff)
    assert dialect.separator == "@@"


def test_mixed_separators_rejected():
    with pytest.raises(InvalidRequestError, match="mixes '...' and '@@' separators"):
        classify_diff("a\n+b\n...\nc\n+d\n@@\ne\n+f")


def test_context_only_diff_rejected():
    with pytest.raises(InvalidRequestError, match="no additions or deletions found"):
        classify_diff("a\nb\nc")


def test_simple_diff_needs_context():
    with pytest.raises(InvalidRequestError, match="requires at least one context line"):
        classify_diff("-old\n+new")


def test_segment_without_context_is_named():
    diff = "function test() {\n+  console.log('added');\n...\n+  console.log('orphaned addition');"
    with pytest.raises(InvalidRequestError, match="Segment 2 has no context lines"):
        classify_diff(diff)


def test_git_headers_before_simple_body_are_dropped():
    diff = "diff --git a/x b/x\nindex 123..456 100644\n--- a/x\n+++ b/x\nfoo\n-bar\n+baz"
    dialect = classify_diff(diff)
    assert isinstance(dialect, SimpleDiff)
    assert dialect.lines[0] == DiffLine(CONTEXT, "foo")


def test_crlf_diff_text():
    dialect = classify_diff("keep\r\n-old\r\n+new\r\n")
    assert [ln.text for ln in dialect.lines] == ["keep", "old", "new"]
