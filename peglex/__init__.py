# peglex/__init__.py
"""peglex: composable PEG matchers.

    from peglex import Registry, plus, check, on_text

    fns = Registry()
    paren = "(" & fns.ref("expr") & ")"
    expr = plus("a" | paren)
    fns.bind("expr", expr)
    expr.match("(a)(a)b")   # -> (True, 6)

Subpackages:
- `peglex.peg` : matcher nodes, engine, registry, text PEG front-end
- `peglex.lex` : token stream built from matchers
"""

from .peg import (
    Pattern, Eps, Any, Char, Range, Str, Seq, Choice, And, Not, Repeat,
    Until, User, ExistCallback, SpanCallback, StringCallback, Regex, Trace,
    EOF_CHAR, as_pattern,
    eps, any_, char, rng, lit, check, not_, star, plus, maybe, until,
    regex, trace, cb, on_match, on_span, on_text,
    eof, space, tab, carriage_return, newline, whitespace, digit, hex,
    lower, upper, alpha, alphanum, digits, pm, integer, real,
    Registry, RegistryError, DuplicateBindingError, UnboundKeyError,
    PegGrammar, PegProgram, PegRunner, parse_peg_grammar,
)
from .lex import LexTok, Lexer, SimpleLexer
