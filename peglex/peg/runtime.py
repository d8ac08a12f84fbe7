# peglex/peg/runtime.py
from __future__ import annotations
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Tuple

from .ast import Pattern, StringCallback
from .parser import PegGrammar, parse_peg_grammar

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def load_grammar_text(path: str) -> str:
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


@dataclass
class PegProgram:
    """Compiled PEG program: every rule bound in the grammar's registry."""
    grammar: PegGrammar

    @classmethod
    def from_source(cls, src: str,
                    actions: Optional[Mapping[str, Callable[[str], None]]] = None) -> "PegProgram":
        g = parse_peg_grammar(src)

        undefined = sorted(g.refs - set(g.rules))
        if undefined:
            raise SyntaxError(f"PEG: undefined rule '{undefined[0]}'")
        for name in (actions or {}):
            g.require_rule(name)

        rules: Dict[str, Pattern] = {}
        for name, expr in g.rules.items():
            if actions and name in actions:
                expr = StringCallback(expr, actions[name])
            rules[name] = expr
            g.registry.bind(name, expr)
        g.rules = rules
        return cls(g)

    @classmethod
    def from_file(cls, path: str,
                  actions: Optional[Mapping[str, Callable[[str], None]]] = None) -> "PegProgram":
        return cls.from_source(load_grammar_text(path), actions)

    @property
    def start(self) -> str:
        return self.grammar.start

    def rule(self, name: str) -> Pattern:
        return self.grammar.require_rule(name)


class PegRunner:
    """Execute PEG program on input text at a given position."""
    def __init__(self, program: PegProgram, debug: bool = False):
        self.program = program
        self.debug = debug

    def run(self, rule_name: Optional[str], text: str, pos: int = 0) -> Tuple[bool, int]:
        name = rule_name or self.program.start
        rule = self.program.rule(name)
        if self.debug:
            _eprint(f"[DEBUG] run rule={name} pos={pos} len={len(text)}")
        ok, end = rule.match(text, pos)
        if self.debug:
            _eprint(f"[DEBUG] rule={name} ok={ok} end={end}")
        return ok, end
