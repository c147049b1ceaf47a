from typing import Any, Dict, Iterator

from kdnlang.errors import InterpreterError


class Environment:
    """Flat mapping of identifiers to values for a whole program run.

    There is no block scoping: an assignment inside a loop or branch
    overwrites any earlier binding of the same name for good.
    """
    def __init__(self):
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        raise InterpreterError('UndefinedVariable', f"Undefined variable '{name}'")

    def define(self, name: str, value: Any):
        """Bind `name`, replacing any previous value."""
        self.values[name] = value
