# peglex/peg/__init__.py
"""PEG matcher nodes and the engine that runs them.

This package provides:
- Matcher nodes (primitives, combinators, sweep, callbacks, regex, trace)
- A keyed registry for recursive grammars
- Builder functions and ready-made character classes
- A text PEG front-end (`rule <- expr`) compiled to matcher nodes
"""

from .ast import (
    Pattern, Eps, Any, Char, Range, Str, Seq, Choice, And, Not, Repeat,
    Until, User, ExistCallback, SpanCallback, StringCallback, Regex, Trace,
    EOF_CHAR, as_pattern,
)
from .builders import (
    eps, any_, char, rng, lit, check, not_, star, plus, maybe, until,
    regex, trace, cb, on_match, on_span, on_text,
    eof, space, tab, carriage_return, newline, whitespace, digit, hex,
    lower, upper, alpha, alphanum, digits, pm, integer, real,
)
from .engine import evaluate, peek, sentinel
from .registry import Registry, RegistryError, DuplicateBindingError, UnboundKeyError
from .parser import PegGrammar, parse_peg_grammar
from .runtime import PegProgram, PegRunner, load_grammar_text
