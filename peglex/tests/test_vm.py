"""A toy statement compiler that emits stack-machine code from match hooks."""

from typing import Dict, List, Tuple

import pytest

from peglex import (
    Registry, char, lit, eps, star, space, tab, carriage_return, alpha,
    alphanum, real, eof, on_match, on_text,
)


class StatementVM:
    def __init__(self):
        self.code: List[Tuple[str, int]] = []
        self.constants: List[float] = []
        self.heap: List[float] = []
        self.symbols: Dict[str, int] = {}

    # ---- emitters ----
    def emit_loadv(self, sym: str) -> None:
        if sym not in self.symbols:
            raise RuntimeError(f"reference to missing symbol {sym!r}")
        self.code.append(("LOADV", self.symbols[sym]))

    def emit_loada(self, sym: str) -> None:
        if sym not in self.symbols:
            self.symbols[sym] = len(self.heap)
            self.heap.append(0.0)
        self.code.append(("LOADA", self.symbols[sym]))

    def emit_loadc(self, text: str) -> None:
        self.code.append(("LOADC", len(self.constants)))
        self.constants.append(float(text))

    def emit(self, op: str, arg: int = 0) -> None:
        self.code.append((op, arg))

    # ---- execution ----
    def run(self) -> List[float]:
        printed = []
        stack: List[float] = []
        for op, arg in self.code:
            if op == "LOADV":
                stack.append(self.heap[arg])
            elif op == "LOADA":
                stack.append(arg)
            elif op == "LOADC":
                stack.append(self.constants[arg])
            elif op == "STORE":
                t = stack.pop()
                self.heap[int(stack.pop())] = t
            elif op == "ADD":
                stack.append(stack.pop() + stack.pop())
            elif op == "SUB":
                t = stack.pop()
                stack.append(stack.pop() - t)
            elif op == "MUL":
                stack.append(stack.pop() * stack.pop())
            elif op == "DIV":
                t = stack.pop()
                stack.append(stack.pop() / t)
            elif op == "PRINT":
                printed.append(stack.pop())
            elif op == "LINE":
                pass
            else:
                raise AssertionError(f"unknown op {op}")
        return printed


def compile_line(vm: StatementVM, line: int, src: str) -> None:
    fns = Registry()

    ws = star(space() | tab() | carriage_return())
    ident = alpha() & star(alphanum())
    number = on_text(real(), vm.emit_loadc) & ws
    rvalue = on_text(ident, vm.emit_loadv) & ws
    lvalue = on_text(ident, vm.emit_loada) & ws

    factor = rvalue | number | ("(" & ws & fns.ref(0) & ")" & ws)
    term = factor & star(
        on_match(char("*") & ws & factor, lambda: vm.emit("MUL"))
        | on_match(char("/") & ws & factor, lambda: vm.emit("DIV"))
    )
    expr = term & star(
        on_match(char("+") & ws & term, lambda: vm.emit("ADD"))
        | on_match(char("-") & ws & term, lambda: vm.emit("SUB"))
    )
    # close the recursion: parenthesised factors are whole expressions
    fns.bind(0, expr)

    stmt = (
        on_match(lit("print") & ws & "(" & ws & expr & ws & ")" & ws, lambda: vm.emit("PRINT"))
        | on_match(lvalue & "=" & ws & expr & ws, lambda: vm.emit("STORE"))
    )
    program = on_match(eps(), lambda: vm.emit("LINE", line)) & stmt & ws & eof()

    ok, _ = program.match(src)
    if not ok:
        raise SyntaxError(f"compile error on line {line}")


def test_compile_and_run():
    vm = StatementVM()
    compile_line(vm, 1, "a = 2.0")
    compile_line(vm, 2, "b = (5.0*(1.0 + 2.0*(3.0+a)) )")
    compile_line(vm, 3, "print( b-a )")
    assert vm.run() == [53.0]


def test_emitted_code_for_assignment():
    vm = StatementVM()
    compile_line(vm, 1, "a = 2.0")
    assert vm.code == [("LINE", 1), ("LOADA", 0), ("LOADC", 0), ("STORE", 0)]


def test_operator_precedence_in_emitted_code():
    vm = StatementVM()
    compile_line(vm, 1, "x = 1.0 + 2.0 * 3.0")
    assert [op for op, _ in vm.code] == [
        "LINE", "LOADA", "LOADC", "LOADC", "LOADC", "MUL", "ADD", "STORE",
    ]
    assert vm.run() == []
    assert vm.heap == [7.0]


def test_syntax_error():
    vm = StatementVM()
    with pytest.raises(SyntaxError, match="line 4"):
        compile_line(vm, 4, "a = = 1.0")


def test_hook_errors_propagate():
    vm = StatementVM()
    with pytest.raises(RuntimeError, match="missing symbol 'zz'"):
        compile_line(vm, 1, "print( zz )")
