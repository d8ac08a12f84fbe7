# peglex/peg/engine.py
from __future__ import annotations
import sys
from .ast import (
    Eps, Any, Char, Range, Str, Seq, Choice, And, Not, Repeat, Until,
    User, ExistCallback, SpanCallback, StringCallback, Regex, Trace,
    Node, MatchResult, EOF_CHAR,
)

# Evaluator:
# - Plain depth-first recursive descent, no memo table; a rule under nested
#   lookahead may be re-evaluated many times.
# - Failure always comes back as (False, pos) with pos unchanged.
# - The sentinel is the first NUL in the text, or len(text). It reads as
#   EOF_CHAR and matchers that accept it stay in place.

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def peek(text: str, pos: int) -> str:
    """Character at pos, EOF_CHAR at (or past) the end of the buffer."""
    if pos < len(text):
        return text[pos]
    return EOF_CHAR


def sentinel(text: str) -> int:
    """Position of the end-of-input sentinel."""
    i = text.find(EOF_CHAR)
    return len(text) if i == -1 else i


def _step(ch: str, pos: int) -> int:
    return pos if ch == EOF_CHAR else pos + 1


def evaluate(node: Node, text: str, pos: int) -> MatchResult:
    if isinstance(node, Char):
        ch = peek(text, pos)
        if ch == node.c:
            return True, _step(ch, pos)
        return False, pos

    if isinstance(node, Str):
        cur = pos
        for c in node.seq:
            ch = peek(text, cur)
            if ch == EOF_CHAR or ch != c:
                return False, pos
            cur += 1
        return True, cur

    if isinstance(node, Seq):
        cur = pos
        for it in node.items:
            ok, end = evaluate(it, text, cur)
            if not ok:
                return False, pos
            cur = end
        return True, cur

    if isinstance(node, Choice):
        for it in node.alts:
            ok, end = evaluate(it, text, pos)
            if ok:
                return True, end
        return False, pos

    if isinstance(node, Range):
        ch = peek(text, pos)
        if node.lo <= ch <= node.hi:
            return True, _step(ch, pos)
        return False, pos

    if isinstance(node, Any):
        return True, _step(peek(text, pos), pos)

    if isinstance(node, Eps):
        return True, pos

    if isinstance(node, Repeat):
        if node.kind == "?":
            ok, end = evaluate(node.node, text, pos)
            return True, (end if ok else pos)
        if node.kind == "+":
            ok, cur = evaluate(node.node, text, pos)
            if not ok:
                return False, pos
        else:
            cur = pos
        while True:
            ok, end = evaluate(node.node, text, cur)
            # no progress means the next round would give the same answer
            if not ok or end == cur:
                break
            cur = end
        return True, cur

    if isinstance(node, And):
        ok, _ = evaluate(node.node, text, pos)
        return ok, pos

    if isinstance(node, Not):
        ok, _ = evaluate(node.node, text, pos)
        return (not ok), pos

    if isinstance(node, Until):
        cur = pos
        while peek(text, cur) != EOF_CHAR:
            ok, _ = evaluate(node.node, text, cur)
            if ok:
                return True, cur
            cur += 1
        return False, pos

    if isinstance(node, User):
        ok, end = node.fn(text, pos)
        return (True, end) if ok else (False, pos)

    if isinstance(node, ExistCallback):
        ok, end = evaluate(node.node, text, pos)
        if ok:
            node.on_exist()
            return True, end
        node.on_missing()
        return False, pos

    if isinstance(node, SpanCallback):
        ok, end = evaluate(node.node, text, pos)
        if ok:
            node.on_exist(text, pos, end)
            return True, end
        node.on_missing()
        return False, pos

    if isinstance(node, StringCallback):
        ok, end = evaluate(node.node, text, pos)
        if ok:
            node.on_exist(text[pos:end])
            return True, end
        node.on_missing()
        return False, pos

    if isinstance(node, Regex):
        m = node.compiled.match(text, pos, sentinel(text))
        if m is None:
            return False, pos
        return True, m.end()

    if isinstance(node, Trace):
        ok, end = evaluate(node.node, text, pos)
        if ok:
            _eprint(f"[TRACE] {node.name} @{pos} -> ok {end}")
        else:
            _eprint(f"[TRACE] {node.name} @{pos} -> fail")
        return ok, end

    raise AssertionError(f"unknown node: {node!r}")
