# peglex/peg/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Pattern as _RePattern, Tuple, Union

import regex as _re

# ---- Matcher node definitions ----
#
# Every node is an immutable value. Children are held directly, so a grammar is
# a tree built bottom-up; cycles only appear through User/Registry indirection.
# Evaluation lives in engine.py.

MatchResult = Tuple[bool, int]
MatchFn = Callable[[str, int], MatchResult]

EOF_CHAR = "\0"


class Pattern:
    """Base class of all matcher nodes.

    `match(text, pos)` returns `(True, end)` on success or `(False, pos)` on
    failure. Operators build bigger grammars:

        a & b   -> Seq
        a | b   -> Choice
        ~a      -> Not

    A plain `str` on either side of `&` / `|` is turned into Char or Str.
    """

    __slots__ = ()

    def match(self, text: str, pos: int = 0) -> MatchResult:
        from .engine import evaluate
        return evaluate(self, text, pos)

    def __and__(self, other) -> "Seq":
        return _seq(self, as_pattern(other))

    def __rand__(self, other) -> "Seq":
        return _seq(as_pattern(other), self)

    def __or__(self, other) -> "Choice":
        return _choice(self, as_pattern(other))

    def __ror__(self, other) -> "Choice":
        return _choice(as_pattern(other), self)

    def __invert__(self) -> "Not":
        return Not(self)


@dataclass(frozen=True)
class Eps(Pattern):
    pass

@dataclass(frozen=True)
class Any(Pattern):
    pass

@dataclass(frozen=True)
class Char(Pattern):
    c: str

    def __post_init__(self):
        if len(self.c) != 1:
            raise ValueError(f"Char expects a single character, got {self.c!r}")

@dataclass(frozen=True)
class Range(Pattern):
    lo: str  # inclusive
    hi: str  # inclusive

    def __post_init__(self):
        if len(self.lo) != 1 or len(self.hi) != 1:
            raise ValueError(f"Range bounds must be single characters: {self.lo!r}..{self.hi!r}")

@dataclass(frozen=True)
class Str(Pattern):
    seq: str

@dataclass(frozen=True)
class Seq(Pattern):
    items: Tuple[Pattern, ...]

@dataclass(frozen=True)
class Choice(Pattern):
    alts: Tuple[Pattern, ...]  # tried left to right

@dataclass(frozen=True)
class And(Pattern):
    node: Pattern  # positive lookahead (check)

@dataclass(frozen=True)
class Not(Pattern):
    node: Pattern  # negative lookahead

@dataclass(frozen=True)
class Repeat(Pattern):
    node: Pattern
    kind: str  # '?', '*', '+'

    def __post_init__(self):
        if self.kind not in ("?", "*", "+"):
            raise ValueError(f"unknown repeat kind {self.kind!r}")

@dataclass(frozen=True)
class Until(Pattern):
    node: Pattern

@dataclass(frozen=True)
class User(Pattern):
    fn: MatchFn

def _noop(*_args) -> None:
    pass

@dataclass(frozen=True)
class ExistCallback(Pattern):
    node: Pattern
    on_exist: Callable[[], None] = _noop
    on_missing: Callable[[], None] = _noop

@dataclass(frozen=True)
class SpanCallback(Pattern):
    """Success hook gets `(text, start, end)`; the text is not copied."""
    node: Pattern
    on_exist: Callable[[str, int, int], None] = _noop
    on_missing: Callable[[], None] = _noop

@dataclass(frozen=True)
class StringCallback(Pattern):
    """Success hook gets the matched text as a new string."""
    node: Pattern
    on_exist: Callable[[str], None] = _noop
    on_missing: Callable[[], None] = _noop

_FLAG_MAP = {
    "i": _re.IGNORECASE,
    "m": _re.MULTILINE,
    "s": _re.DOTALL,
    "x": _re.VERBOSE,
    "A": _re.ASCII,
}

def _compile_regex(pat: str, flags: str) -> _RePattern:
    f = 0
    for ch in flags:
        if ch not in _FLAG_MAP:
            raise ValueError(f"unknown regex flag {ch!r}")
        f |= _FLAG_MAP[ch]
    return _re.compile(pat, f)

@dataclass(frozen=True)
class Regex(Pattern):
    pattern: str
    flags: str = ""
    compiled: _RePattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "compiled", _compile_regex(self.pattern, self.flags))

@dataclass(frozen=True)
class Trace(Pattern):
    node: Pattern
    name: str


Node = Union[
    Eps, Any, Char, Range, Str, Seq, Choice, And, Not, Repeat, Until,
    User, ExistCallback, SpanCallback, StringCallback, Regex, Trace,
]

# ---- Coercion / flattening helpers ----

def as_pattern(x) -> Pattern:
    """Turn a grammar operand into a node: one char -> Char, longer str -> Str."""
    if isinstance(x, Pattern):
        return x
    if isinstance(x, str):
        if len(x) == 1:
            return Char(x)
        return Str(x)
    raise TypeError(f"cannot use {type(x).__name__} as a grammar pattern")

def _seq(left: Pattern, right: Pattern) -> Seq:
    items = left.items if isinstance(left, Seq) else (left,)
    items += right.items if isinstance(right, Seq) else (right,)
    return Seq(items)

def _choice(left: Pattern, right: Pattern) -> Choice:
    alts = left.alts if isinstance(left, Choice) else (left,)
    alts += right.alts if isinstance(right, Choice) else (right,)
    return Choice(alts)
