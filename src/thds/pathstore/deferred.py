"""A value that does not exist yet.

A Deferred sits in the tree like any other value until a traversal reaches it, at which
point its producer gets called with the arguments it was created with. What happens to the
result depends on `always`:

- `always=False` (the default) - the result replaces the Deferred in its parent mapping.
  Expensive but stable things get computed once.
- `always=True` - the Deferred stays where it is and the result is only used for the
  traversal that forced it. Good for values derived from other, mutable configuration.
"""

import typing as ty
from dataclasses import dataclass, field

R = ty.TypeVar("R")


@dataclass(frozen=True)
class Deferred(ty.Generic[R]):
    producer: ty.Callable[..., R]
    args: ty.Tuple[ty.Any, ...] = field(default=())
    always: bool = False

    def __post_init__(self):
        if not callable(self.producer):
            raise TypeError(f"Deferred producer must be callable, got {type(self.producer).__name__}")
        # lists are accepted for convenience but a Deferred must never see its arguments change.
        object.__setattr__(self, "args", tuple(self.args))

    def force(self) -> R:
        """Exactly one call to the producer. Whatever it raises is raised from here."""
        return self.producer(*self.args)

    def __repr__(self) -> str:
        name = getattr(self.producer, "__qualname__", repr(self.producer))
        return f"Deferred({name}, args={self.args!r}, always={self.always})"


def deferred(producer: ty.Callable[..., R], *args: ty.Any, always: bool = False) -> Deferred[R]:
    """For embedding a lazy value directly inside a mapping, e.g.

    store.set("db", {"host": "localhost", "password": deferred(read_secret, "db-password")})
    """
    return Deferred(producer, args, always)
