"""
Lexical scopes for the Monkey interpreter.

An `Environment` is a mutable name → value table with an optional link to the
enclosing environment. One root environment is created per program (or per
REPL session) and one child per function call. A call's child environment
links to the environment captured by the called function, not to the
caller's, which is what makes closures work.

Environments are shared by reference: every closure created in the same call,
and every call frame of those closures, points at the same parent object.
The `outer` chain is built only from existing environments, so it can never
form a cycle.
"""

from __future__ import annotations

from monkey.monkey_object import Object


class Environment:
    """A single scope in the lexical scope chain.

    Attributes:
        store (dict[str, Object]): Bindings made in this scope.
        outer (Environment | None): The enclosing scope, or None for the root.
    """

    def __init__(self, outer: Environment | None = None) -> None:
        self.store: dict[str, Object] = {}
        self.outer = outer

    def get(self, name: str) -> Object | None:
        """Look `name` up here, then in each enclosing scope in turn."""
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        """Bind `name` in this scope (shadowing any outer binding) and return `value`."""
        self.store[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        names = ", ".join(sorted(self.store))
        return f"Environment([{names}], outer={'yes' if self.outer is not None else 'no'})"


def new_enclosed_environment(outer: Environment) -> Environment:
    return Environment(outer)
