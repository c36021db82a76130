from typing import Any, Dict, Iterable, List, Optional, Tuple

from rinha.ast import Location
from rinha.errors import RinhaError
from rinha.types import ErrorVal, Reason


class _Pending:
    """Placeholder for a `let` slot that is filled after the closure exists."""
    def __repr__(self) -> str:
        return '<pending>'


PENDING = _Pending()


class Environment:
    """A persistent chain of variable frames.

    Each frame owns a small mapping and a reference to its parent. Frames
    are never changed once built: `bind` and `bind_all` return a new child
    frame. The only exception is a slot created by `bind_pending`, which
    `resolve` fills exactly once so that a function bound by `let` can
    refer to itself.
    """
    __slots__ = ('parent', 'values')

    def __init__(self, parent: Optional['Environment'] = None, values: Optional[Dict[str, Any]] = None):
        self.parent = parent
        self.values: Dict[str, Any] = values if values is not None else {}

    @classmethod
    def empty(cls) -> 'Environment':
        return cls()

    def bind(self, name: str, value: Any) -> 'Environment':
        return Environment(self, {name: value})

    def bind_all(self, pairs: Iterable[Tuple[str, Any]]) -> 'Environment':
        return Environment(self, dict(pairs))

    def bind_pending(self, name: str) -> 'Environment':
        return Environment(self, {name: PENDING})

    def resolve(self, name: str, value: Any) -> None:
        if self.values.get(name) is not PENDING:
            raise ValueError(f'{name} is not a pending binding in this frame')
        self.values[name] = value

    def lookup(self, name: str, location: Location = Location()) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                value = env.values[name]
                if value is PENDING:
                    break
                return value
            env = env.parent
        raise RinhaError(ErrorVal(Reason.UNDEFINED_VARIABLE, f'undefined variable {name}', location))

    def names(self) -> List[str]:
        """Visible names, innermost first, without duplicates."""
        seen: List[str] = []
        env: Optional[Environment] = self
        while env is not None:
            for name in env.values:
                if name not in seen:
                    seen.append(name)
            env = env.parent
        return seen
