"""
Lexical environments for the Monkey evaluator.

An Environment maps names to runtime values and may point at an enclosing
(outer) Environment. Lookups walk outward until the name is found; writes
always land in the innermost store, so `let` inside a function shadows an
outer binding instead of changing it.

A fresh top-level Environment is created per program run or REPL session,
and one enclosed Environment per function call, whose outer scope is the
environment the function was *defined* in. Closures keep that environment
alive for as long as they are reachable.
"""

from __future__ import annotations

from monkey.monkey_object import Object


class Environment:
    """A single scope in the environment chain.

    Attributes:
        store (dict[str, Object]): Bindings local to this scope.
        outer (Environment | None): Enclosing scope, if any.
    """

    def __init__(self, outer: Environment | None = None) -> None:
        self.store: dict[str, Object] = {}
        self.outer = outer

    @classmethod
    def new(cls) -> Environment:
        return cls()

    @classmethod
    def new_enclosed(cls, outer: Environment) -> Environment:
        return cls(outer)

    def get(self, name: str) -> Object | None:
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        return f"Environment(names={sorted(self.store)!r}, enclosed={self.outer is not None})"
