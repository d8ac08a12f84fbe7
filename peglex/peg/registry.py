# peglex/peg/registry.py
"""Keyed table of matching functions, used to close recursive grammars.

Grammars are built bottom-up, so a rule cannot hold its own ancestor. Instead
a node asks the registry for a key (`ref`/`cb`) and the finished rule is bound
to that key afterwards:

    fns = Registry()
    paren = "(" & fns.ref(0) & ")"
    expr = plus("a" | paren)
    fns.bind(0, expr)

The registry must outlive every node that refers to it. It takes no locks:
fill it completely before matching from several threads.
"""

from __future__ import annotations
from typing import Dict, Hashable, Iterator

from .ast import Pattern, User, MatchFn, MatchResult


class RegistryError(RuntimeError):
    """Grammar assembly mistake (never a match failure)."""


class DuplicateBindingError(RegistryError):
    pass


class UnboundKeyError(RegistryError, KeyError):
    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class Registry:
    def __init__(self):
        self._registry: Dict[Hashable, MatchFn] = {}

    # ---- binding ----
    def bind(self, key: Hashable, pattern: Pattern) -> None:
        self.set(key, pattern.match)

    def set(self, key: Hashable, fn: MatchFn) -> None:
        if key in self._registry:
            raise DuplicateBindingError(f"tried to add duplicate matcher for key {key!r}")
        self._registry[key] = fn

    # ---- lookup ----
    def get(self, key: Hashable) -> MatchFn:
        try:
            return self._registry[key]
        except KeyError:
            raise UnboundKeyError(f"no matcher registered for key {key!r}") from None

    def cb(self, key: Hashable) -> MatchFn:
        """Late-bound matching function for key; resolved on every call."""
        def _forward(text: str, pos: int) -> MatchResult:
            return self.get(key)(text, pos)
        return _forward

    def ref(self, key: Hashable) -> User:
        return User(self.cb(key))

    def match(self, key: Hashable, text: str, pos: int = 0) -> MatchResult:
        return self.get(key)(text, pos)

    # ---- introspection ----
    def __contains__(self, key: Hashable) -> bool:
        return key in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def keys(self) -> Iterator[Hashable]:
        return iter(self._registry.keys())
