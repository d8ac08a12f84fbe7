import pytest

from peglex import LexTok, SimpleLexer, PegProgram, lit, regex

GRAMMAR = r"""
    ident  <- [a-zA-Z_] [a-zA-Z0-9_]*
    number <- [0-9]+
    ws     <- [ \t\n]+
"""


def make_lexer():
    prog = PegProgram.from_source(GRAMMAR)
    return SimpleLexer.from_program(
        prog, tokens=["ident", "number"], ignores=["ws"], keywords=["if", "==", "="],
    )


def test_token_stream_with_positions():
    lx = make_lexer()
    lx.reset("if x1 == 42\n  iffy = 7")
    assert list(lx) == [
        LexTok("if", "if", 1, 1),
        LexTok("ident", "x1", 1, 4),
        LexTok("==", "==", 1, 7),
        LexTok("number", "42", 1, 10),
        LexTok("ident", "iffy", 2, 3),
        LexTok("=", "=", 2, 8),
        LexTok("number", "7", 2, 10),
    ]


def test_peek_does_not_consume():
    lx = make_lexer()
    lx.reset("a b")
    first = lx.peek()
    assert lx.peek() == first
    assert lx.next() == first
    assert lx.next().text == "b"
    assert lx.next() is None


def test_unexpected_character():
    lx = make_lexer()
    lx.reset("x $")
    assert lx.next().text == "x"
    with pytest.raises(SyntaxError, match=r"unexpected character '\$' at 1:3"):
        lx.next()


def test_longest_match_then_declaration_order():
    lx = SimpleLexer([], [("short", lit("ab")), ("word", regex("[a-z]+"))])
    lx.reset("abc")
    assert lx.next() == LexTok("word", "abc", 1, 1)

    lx = SimpleLexer([], [("first", lit("ab")), ("second", regex("ab"))])
    lx.reset("ab")
    assert lx.next().type == "first"


def test_stops_at_sentinel():
    lx = make_lexer()
    lx.reset("ab\0cd")
    assert [t.text for t in lx] == ["ab"]


def test_unicode_word_keyword_boundary():
    lx = SimpleLexer(["if"], [("word", regex(r"\w+"))])
    lx.reset("ifé")
    assert lx.next() == LexTok("word", "ifé", 1, 1)
