# peglex/peg/parser.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Set

from .ast import (
    Pattern, Eps, Any, Char, Range, Str, Seq, Choice, And, Not, Repeat,
    EOF_CHAR,
)
from .registry import Registry

# Text notation compiled straight into matcher nodes:
#   grammar  := (rule)+
#   rule     := IDENT "<-" expr
#   expr     := seq ("/" seq)*
#   seq      := (prefix)*
#   prefix   := ("&"|"!")? suffix
#   suffix   := primary ("?"|"*"|"+")?
#   primary  := IDENT | literal | class | "." | "$" | "(" expr ")"
#
#   literal  := ' ... ' | " ... "  (escapes \n \r \t \\ \" \' \xHH \uXXXX)
#   class    := "[" "^"? (char "-" char | char)+ "]"
#   "."      := any character (stays put on the sentinel)
#   "$"      := end of input
#   comments: "#" / "//" to end of line, "/*" ... "*/"
#
# An IDENT in an expression becomes a registry indirection, so rules may use
# rules defined further down, or themselves.

@dataclass
class PegGrammar:
    rules: Dict[str, Pattern]
    start: str
    registry: Registry
    refs: Set[str] = field(default_factory=set)

    def require_rule(self, name: str) -> Pattern:
        try:
            return self.rules[name]
        except KeyError:
            raise SyntaxError(f"PEG: undefined rule '{name}'") from None


class _TS:
    def __init__(self, src: str, registry: Registry):
        self.s = src
        self.i = 0
        self.n = len(src)
        self.registry = registry
        self.refs: Set[str] = set()

    # ---- cursor ----
    def _peek(self, k: int = 0) -> Optional[str]:
        j = self.i + k
        return self.s[j] if j < self.n else None

    def _starts(self, lit: str) -> bool:
        return self.s.startswith(lit, self.i)

    def _eof(self) -> bool:
        return self.i >= self.n

    def _err(self, msg: str) -> SyntaxError:
        return SyntaxError(f"PEG parse error at {self.i}: {msg}")

    def _skip_line(self) -> None:
        j = self.s.find("\n", self.i)
        self.i = self.n if j == -1 else j

    def _skip_ws(self) -> None:
        while not self._eof():
            if self._starts("/*"):
                j = self.s.find("*/", self.i + 2)
                if j == -1:
                    raise self._err("unclosed block comment")
                self.i = j + 2
            elif self._starts("//") or self._starts("#"):
                self._skip_line()
            elif self.s[self.i] in " \t\r\n":
                self.i += 1
            else:
                break

    def _eat(self, lit: str) -> None:
        if not self._try_eat(lit):
            raise self._err(f"expected {lit!r}")

    def _try_eat(self, lit: str) -> bool:
        self._skip_ws()
        if self._starts(lit):
            self.i += len(lit)
            return True
        return False

    # ---- lexemes ----
    @staticmethod
    def _is_ident_start(ch: Optional[str]) -> bool:
        return ch is not None and (ch.isalpha() or ch == "_")

    @staticmethod
    def _is_ident_continue(ch: Optional[str]) -> bool:
        return ch is not None and (ch.isalnum() or ch == "_")

    def _ident(self) -> str:
        self._skip_ws()
        if not self._is_ident_start(self._peek()):
            raise self._err("expected IDENT")
        start = self.i
        self.i += 1
        while self._is_ident_continue(self._peek()):
            self.i += 1
        return self.s[start:self.i]

    def _hex_digits(self, count: int) -> str:
        digits = self.s[self.i:self.i + count]
        if len(digits) != count or any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise self._err("invalid hex escape")
        self.i += count
        return chr(int(digits, 16))

    _SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": EOF_CHAR}

    def _read_escape(self) -> str:
        c = self._peek()
        if c is None:
            raise self._err("unterminated escape")
        self.i += 1
        if c == "x":
            return self._hex_digits(2)
        if c == "u":
            return self._hex_digits(4)
        # quotes, backslash and anything unknown stand for themselves
        return self._SIMPLE_ESCAPES.get(c, c)

    def _literal(self) -> Pattern:
        q = self._peek()
        self.i += 1
        out: List[str] = []
        while True:
            c = self._peek()
            if c is None:
                raise self._err("unterminated string")
            self.i += 1
            if c == q:
                break
            out.append(self._read_escape() if c == "\\" else c)
        text = "".join(out)
        if not text:
            return Eps()
        return Char(text) if len(text) == 1 else Str(text)

    def _class_char(self) -> str:
        c = self._peek()
        if c is None:
            raise self._err("unterminated char class")
        if c == "]":
            raise self._err("unexpected ']' in char class")
        self.i += 1
        return self._read_escape() if c == "\\" else c

    def _class(self) -> Pattern:
        self.i += 1  # '['
        negated = False
        if self._peek() == "^":
            negated = True
            self.i += 1
        parts: List[Pattern] = []
        while self._peek() != "]":
            lo = self._class_char()
            if self._peek() == "-" and self._peek(1) not in (None, "]"):
                self.i += 1
                hi = self._class_char()
                if lo > hi:
                    lo, hi = hi, lo
                parts.append(Range(lo, hi))
            else:
                parts.append(Char(lo))
        self.i += 1  # ']'
        if not parts:
            raise self._err("empty char class")
        cls = parts[0] if len(parts) == 1 else Choice(tuple(parts))
        if negated:
            # the sentinel is never part of a negated class
            return Seq((Not(Choice((cls, Char(EOF_CHAR)))), Any()))
        return cls

    # --- recursive descent for expressions ---

    def parse_grammar(self) -> PegGrammar:
        rules: Dict[str, Pattern] = {}
        start_name: Optional[str] = None
        while True:
            self._skip_ws()
            if self._eof():
                break
            name = self._ident()
            self._eat("<-")
            expr = self._parse_expr()
            if name in rules:
                raise self._err(f"duplicate rule '{name}'")
            rules[name] = expr
            if start_name is None:
                start_name = name
        if not rules:
            raise self._err("empty PEG grammar")
        return PegGrammar(rules=rules, start=start_name, registry=self.registry, refs=self.refs)

    def _parse_expr(self) -> Pattern:
        alts = [self._parse_seq()]
        while self._try_eat("/"):
            alts.append(self._parse_seq())
        return alts[0] if len(alts) == 1 else Choice(tuple(alts))

    def _at_rule_head(self) -> bool:
        save = self.i
        try:
            self._ident()
            return self._try_eat("<-")
        finally:
            self.i = save

    def _parse_seq(self) -> Pattern:
        items: List[Pattern] = []
        while True:
            self._skip_ws()
            ch = self._peek()
            if ch is None or ch in ")/":
                break
            if self._is_ident_start(ch) and self._at_rule_head():
                break
            items.append(self._parse_prefix())
        if not items:
            return Eps()
        return items[0] if len(items) == 1 else Seq(tuple(items))

    def _parse_prefix(self) -> Pattern:
        if self._try_eat("&"):
            return And(self._parse_suffix())
        if self._try_eat("!"):
            return Not(self._parse_suffix())
        return self._parse_suffix()

    def _parse_suffix(self) -> Pattern:
        node = self._parse_primary()
        self._skip_ws()
        ch = self._peek()
        if ch is not None and ch in "?*+":
            self.i += 1
            return Repeat(node, ch)
        return node

    def _parse_primary(self) -> Pattern:
        self._skip_ws()
        ch = self._peek()
        if ch == "(":
            self.i += 1
            e = self._parse_expr()
            self._eat(")")
            return e
        if ch == ".":
            self.i += 1
            return Any()
        if ch == "$":
            self.i += 1
            return Char(EOF_CHAR)
        if ch in ("'", '"'):
            return self._literal()
        if ch == "[":
            return self._class()
        if not self._is_ident_start(ch):
            raise self._err(f"unexpected {ch!r}")
        name = self._ident()
        self.refs.add(name)
        return self.registry.ref(name)


def parse_peg_grammar(src: str, registry: Optional[Registry] = None) -> PegGrammar:
    """Parse PEG rules into matcher nodes. Rules are not bound yet; see runtime.PegProgram."""
    ts = _TS(src, registry if registry is not None else Registry())
    return ts.parse_grammar()
