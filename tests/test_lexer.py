import pytest
from hypothesis import given, strategies as st

from oreore.reader.lexer import is_number, tokenize, utf16_len
from oreore.types.location import Position

URI = "file:///lexer.oreore"


def _kinds(source):
    return [(t.kind, t.text) for t in tokenize(URI, source)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("", []),
        ("  \t\r\n ", []),
        ("a", [("variable", "a")]),
        ("42", [("number", "42")]),
        ("(+ 1 2)", [("(", "("), ("variable", "+"), ("number", "1"), ("number", "2"), (")", ")")]),
        ("(f)(g)", [("(", "("), ("variable", "f"), (")", ")"), ("(", "("), ("variable", "g"), (")", ")")]),
        ("; note\nx", [("comment", "; note"), ("variable", "x")]),
        ("x; trailing", [("variable", "x"), ("comment", "; trailing")]),
        ("foo-bar? 1.5e3 -7", [("variable", "foo-bar?"), ("number", "1.5e3"), ("number", "-7")]),
        ("a;b", [("variable", "a"), ("comment", ";b")]),
    ],
)
def test_lexer_basic(source, expected):
    assert _kinds(source) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("0", True),
        ("-12", True),
        ("+3", True),
        ("3.", True),
        (".5", True),
        ("1e10", True),
        ("2.5E-3", True),
        ("", False),
        ("-", False),
        (".", False),
        ("0x1f", False),
        ("Infinity", False),
        ("inf", False),
        ("nan", False),
        ("1_000", False),
        ("1e", False),
        ("12abc", False),
    ],
)
def test_number_classification(text, expected):
    assert is_number(text) is expected


def test_positions_track_lines_and_columns():
    tokens = tokenize(URI, "(defun f (x)\n  x)")
    starts = [(t.text, t.range.start, t.range.end) for t in tokens]
    assert starts == [
        ("(", Position(0, 0), Position(0, 1)),
        ("defun", Position(0, 1), Position(0, 6)),
        ("f", Position(0, 7), Position(0, 8)),
        ("(", Position(0, 9), Position(0, 10)),
        ("x", Position(0, 10), Position(0, 11)),
        (")", Position(0, 11), Position(0, 12)),
        ("x", Position(1, 2), Position(1, 3)),
        (")", Position(1, 3), Position(1, 4)),
    ]
    assert all(t.location.uri == URI for t in tokens)


def test_tabs_are_not_expanded():
    (token,) = tokenize(URI, "\t\tx")
    assert token.range.start == Position(0, 2)


def test_columns_count_utf16_units():
    tokens = tokenize(URI, "(\U0001F600 é)")
    emoji, accent = tokens[1], tokens[2]
    assert emoji.range.start == Position(0, 1)
    assert emoji.range.end == Position(0, 3)
    assert accent.range.start == Position(0, 4)
    assert accent.range.end == Position(0, 5)
    assert utf16_len("\U0001F600é") == 3


def test_display_kind_starts_as_lexical_kind():
    for token in tokenize(URI, "(f 1) ; c"):
        assert token.display_kind == token.kind


# --- Properties ---

_ALPHABET = st.sampled_from(list("() ;\t\r\nab1.+-é"))


@given(st.text(alphabet=_ALPHABET, max_size=80))
def test_tokens_cover_source_exactly(source):
    """Each token sits exactly where its position says, tokens appear in
    order, and everything between them is whitespace."""
    tokens = tokenize(URI, source)
    lines = source.split("\n")
    covered = [[False] * len(line) for line in lines]

    previous_end = Position(0, 0)
    for token in tokens:
        start, end = token.range.start, token.range.end
        assert previous_end <= start
        assert start.line == end.line
        assert end.character - start.character == len(token.text)
        assert lines[start.line][start.character:end.character] == token.text
        for column in range(start.character, end.character):
            covered[start.line][column] = True
        previous_end = end

    for line, marks in zip(lines, covered):
        for ch, mark in zip(line, marks):
            assert mark or ch in " \t\r"


@given(st.text(alphabet=_ALPHABET, max_size=80))
def test_non_comment_text_is_preserved(source):
    tokens = tokenize(URI, source)
    joined = "".join(t.text for t in tokens if t.kind != "comment")
    without_comments = "\n".join(line.split(";", 1)[0] for line in source.split("\n"))
    assert joined == "".join(ch for ch in without_comments if ch not in " \t\r\n")
