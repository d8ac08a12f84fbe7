# peglex/peg/builders.py
"""Lower-case constructors for grammar nodes plus a few ready-made classes.

Arguments that take a pattern also accept a plain `str` (one character ->
Char, longer -> Str), so `star("ab")` and `until('"')` work directly.
"""

from __future__ import annotations
from typing import Callable

from .ast import (
    Pattern, Eps, Any, Char, Range, Str, And, Not, Repeat, Until, User,
    ExistCallback, SpanCallback, StringCallback, Regex, Trace,
    MatchFn, EOF_CHAR, as_pattern, _noop,
)

def eps() -> Eps:
    return Eps()

def any_() -> Any:
    return Any()

def char(c: str) -> Char:
    return Char(c)

def rng(lo: str, hi: str) -> Range:
    return Range(lo, hi)

def lit(seq: str) -> Str:
    return Str(seq)

def check(expr) -> And:
    return And(as_pattern(expr))

def not_(expr) -> Not:
    return Not(as_pattern(expr))

def star(expr) -> Repeat:
    return Repeat(as_pattern(expr), "*")

def plus(expr) -> Repeat:
    return Repeat(as_pattern(expr), "+")

def maybe(expr) -> Repeat:
    return Repeat(as_pattern(expr), "?")

def until(expr) -> Until:
    return Until(as_pattern(expr))

def regex(pattern: str, flags: str = "") -> Regex:
    return Regex(pattern, flags)

def trace(expr, name: str) -> Trace:
    return Trace(as_pattern(expr), name)

# ---- callback hooks ----

def cb(fn: MatchFn) -> User:
    """Wrap a hand-written `fn(text, pos) -> (ok, end)` as a grammar leaf."""
    return User(fn)

def on_match(expr, on_exist: Callable[[], None],
             on_missing: Callable[[], None] = _noop) -> ExistCallback:
    return ExistCallback(as_pattern(expr), on_exist, on_missing)

def on_span(expr, on_exist: Callable[[str, int, int], None],
            on_missing: Callable[[], None] = _noop) -> SpanCallback:
    return SpanCallback(as_pattern(expr), on_exist, on_missing)

def on_text(expr, on_exist: Callable[[str], None],
            on_missing: Callable[[], None] = _noop) -> StringCallback:
    return StringCallback(as_pattern(expr), on_exist, on_missing)

# ---- convenience definitions ----

def eof() -> Char:
    return Char(EOF_CHAR)

def space() -> Char:
    return Char(" ")

def tab() -> Char:
    return Char("\t")

def carriage_return() -> Char:
    return Char("\r")

def newline() -> Char:
    return Char("\n")

def whitespace() -> Pattern:
    return space() | tab() | carriage_return() | newline()

def digit() -> Range:
    return Range("0", "9")

def hex() -> Pattern:
    return Range("0", "9") | Range("a", "f") | Range("A", "F")

def lower() -> Range:
    return Range("a", "z")

def upper() -> Range:
    return Range("A", "Z")

def alpha() -> Pattern:
    return lower() | upper()

def alphanum() -> Pattern:
    return alpha() | digit()

def digits() -> Repeat:
    return plus(digit())

def pm() -> Pattern:
    return Char("+") | Char("-")

def integer() -> Pattern:
    return maybe(pm()) & digits()

def real() -> Pattern:
    # sign, digits, '.', optional fraction, optional exponent
    exponent = (Char("e") | Char("E")) & maybe(pm()) & digits()
    return maybe(pm()) & digits() & Char(".") & maybe(digits()) & maybe(exponent)
