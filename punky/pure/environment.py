"""Lexical scopes. An Environment maps names to runtime values and is chained to the scope enclosing it."""

from typing import Optional


class Environment:
    """Environment to store bindings, with an optional enclosing (outer) scope for lookups."""

    def __init__(self, outer: Optional["Environment"] = None):
        self.store = {}
        self.outer = outer

    @classmethod
    def enclosed(cls, outer: "Environment") -> "Environment":
        """New empty scope whose lookups fall back to outer. Used for function call frames."""
        return cls(outer)

    def get(self, name: str):
        """Returns the value bound to name in this scope or the nearest enclosing one, or None if unbound."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value):
        """Binds name in this scope only (shadowing any outer binding) and returns value."""
        self.store[name] = value
        return value

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"{type(self).__name__}({sorted(self.store)!r}, outer={self.outer!r})"
