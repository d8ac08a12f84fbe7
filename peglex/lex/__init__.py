# peglex/lex/__init__.py
"""Token stream driven by PEG matchers.

Matching order at each position:
  1) skip ignore patterns for as long as any of them makes progress
  2) keywords (literals), longest first; word-like keywords must sit on
     identifier boundaries on both sides
  3) token patterns, longest non-empty match; ties go to declaration order
  4) nothing matched -> SyntaxError

API
---
- `LexTok(type: str, text: str, line: int, col: int)`
- `Lexer` protocol: `peek() -> Optional[LexTok]`, `next() -> Optional[LexTok]`
- `SimpleLexer.from_program(program, tokens, ignores, keywords)`
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import regex

from ..peg.ast import Pattern, as_pattern
from ..peg.engine import sentinel
from ..peg.runtime import PegProgram

_RE_XID_CONT = regex.compile(r"\p{XID_Continue}")

def _is_ident_continue(ch: str) -> bool:
    return bool(_RE_XID_CONT.fullmatch(ch))

def _is_word_keyword(s: str) -> bool:
    return any(_is_ident_continue(c) for c in s)

# --------- Public datatypes ---------

@dataclass(frozen=True)
class LexTok:
    type: str   # keyword literal or token name
    text: str   # lexeme
    line: int   # 1-based
    col: int    # 1-based

class Lexer:
    """Minimal interface expected by consumers."""
    def peek(self) -> Optional[LexTok]:
        raise NotImplementedError
    def next(self) -> Optional[LexTok]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[LexTok]:
        while True:
            t = self.next()
            if t is None:
                return
            yield t

# --------- Core implementation ---------

class SimpleLexer(Lexer):
    def __init__(self,
                 keywords: Iterable[str],
                 tokens: Sequence[Tuple[str, object]],
                 ignores: Iterable[object] = ()):
        # dedupe keywords (first wins), then longest first, stable on declaration order
        seen = set()
        kws: List[str] = []
        for lit in keywords:
            if lit and lit not in seen:
                seen.add(lit)
                kws.append(lit)
        kws.sort(key=len, reverse=True)
        self._keywords = kws
        self._tokens: List[Tuple[str, Pattern]] = [(name, as_pattern(p)) for name, p in tokens]
        self._ignores: List[Pattern] = [as_pattern(p) for p in ignores]
        self.reset("")

    @classmethod
    def from_program(cls, program: PegProgram,
                     tokens: Iterable[str],
                     ignores: Iterable[str] = (),
                     keywords: Iterable[str] = ()) -> "SimpleLexer":
        """Build a lexer from named rules of a compiled PEG program."""
        toks = [(name, program.rule(name)) for name in tokens]
        igns = [program.rule(name) for name in ignores]
        return cls(keywords, toks, igns)

    # ---- Input binding ----
    def reset(self, text: str, *, line: int = 1, col: int = 1) -> None:
        self._text = text
        self._end = sentinel(text)
        self._i = 0
        self._line = line
        self._col = col
        self._peek_cache: Optional[LexTok] = None

    # ---- Public API ----
    def peek(self) -> Optional[LexTok]:
        if self._peek_cache is None:
            self._peek_cache = self._next_token()
        return self._peek_cache

    def next(self) -> Optional[LexTok]:
        if self._peek_cache is not None:
            t = self._peek_cache
            self._peek_cache = None
            return t
        return self._next_token()

    # ---- Internals ----
    def _advance_to(self, end: int) -> None:
        consumed = self._text[self._i:end]
        nl = consumed.count("\n")
        if nl:
            self._line += nl
            self._col = len(consumed) - consumed.rfind("\n")
        else:
            self._col += len(consumed)
        self._i = end

    def _skip_ignores(self) -> None:
        while self._i < self._end:
            for pat in self._ignores:
                ok, end = pat.match(self._text, self._i)
                if ok and end > self._i:
                    self._advance_to(end)
                    break
            else:
                return

    def _match_keyword(self) -> Optional[Tuple[str, int]]:
        s = self._text
        i = self._i
        for lit in self._keywords:
            if not s.startswith(lit, i) or i + len(lit) > self._end:
                continue
            if _is_word_keyword(lit):
                if i > 0 and _is_ident_continue(s[i - 1]):
                    continue
                j = i + len(lit)
                if j < self._end and _is_ident_continue(s[j]):
                    continue
            return lit, i + len(lit)
        return None

    def _match_token(self) -> Optional[Tuple[str, int]]:
        best: Optional[Tuple[str, int]] = None
        for name, pat in self._tokens:
            ok, end = pat.match(self._text, self._i)
            if ok and end > self._i and (best is None or end > best[1]):
                best = (name, end)
        return best

    def _next_token(self) -> Optional[LexTok]:
        self._skip_ignores()
        if self._i >= self._end:
            return None

        hit = self._match_keyword()
        if hit is not None:
            kind, end = hit[0], hit[1]
        else:
            hit = self._match_token()
            if hit is None:
                ch = self._text[self._i]
                raise SyntaxError(f"Lexing error: unexpected character {ch!r} at {self._line}:{self._col}")
            kind, end = hit

        tok = LexTok(type=kind, text=self._text[self._i:end], line=self._line, col=self._col)
        self._advance_to(end)
        return tok
