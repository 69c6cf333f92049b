"""A nested key-value store addressed by delimited paths.

```
store = PathStore()
store.set("db", {"host": "127.0.0.1", "username": "admin"})
assert store.get("db.username") == "admin"
assert store.get("db.charset") is None
assert store.get("db.charset", "UTF-8") == "UTF-8"

store.set("db.options.timeout", 30)  # intermediate mappings are created as needed
assert store.get("db.options") == {"timeout": 30}

store.lazy_set("db.tables", load_tables, ["schema.sql"])  # nothing is loaded yet
store.get("db.tables")  # load_tables("schema.sql") is called here, once.
```

A store is not thread-safe. If you must share one across threads, guard every call with
a single lock - and remember that forcing a Deferred runs its producer while you hold it.

Reads are memoized by their full key. Writing or removing a key forgets the memoized read
of that exact key only; if you have read `db.username` and then replace all of `db`, call
`clear_cache()` or you may keep seeing the old username.
"""

import typing as ty
from collections.abc import Mapping

from thds.core import config

from .deferred import Deferred
from .keys import DEFAULT_SEP, split_key
from .resolve import Address, resolve
from .view import ReadOnlyView, copy_tree, flatten

PATH_SEPARATOR = config.item("thds.pathstore.path_separator", default=DEFAULT_SEP)
_ABSENT = object()  # get() was not given a default
_MISSING = object()


class InvalidKeyError(ValueError):
    pass


def _own(value: ty.Any) -> ty.Any:
    # mappings are copied on the way in so that writes through the store never reach
    # back into the caller's objects.
    if isinstance(value, Mapping):
        return copy_tree(value)
    return value


class PathStore:
    def __init__(
        self,
        items: ty.Optional[ty.Mapping[str, ty.Any]] = None,
        *,
        path_separator: ty.Optional[str] = None,
        default_value: ty.Any = None,
    ):
        """path_separator defaults to the `thds.pathstore.path_separator` config item.

        default_value is what `get` returns for missing keys when it was not given a
        default of its own.
        """
        sep = PATH_SEPARATOR() if path_separator is None else path_separator
        if not isinstance(sep, str) or not sep:
            raise ValueError(f"Path separator must be a non-empty string, got {sep!r}")
        self.path_separator: str = sep
        self.default_value = default_value
        self._items: ty.Dict[str, ty.Any] = copy_tree(items) if items is not None else dict()
        self._caches: ty.Dict[str, ty.Any] = dict()

    @classmethod
    def from_flat(
        cls,
        flat: ty.Mapping[str, ty.Any],
        *,
        path_separator: ty.Optional[str] = None,
        default_value: ty.Any = None,
    ) -> "PathStore":
        """The inverse of `flatten`. Keys are set in iteration order, so a later key wins
        over an earlier one when they overlap.
        """
        store = cls(path_separator=path_separator, default_value=default_value)
        for key, value in flat.items():
            store.set(key, value)
        return store

    def _resolve(self, key: ty.Any, create: bool = False, force_last: bool = True) -> ty.Optional[Address]:
        segments = split_key(key, self.path_separator)
        return resolve(self._items, segments, create=create, force_last=force_last)

    def _resolve_for_write(self, key: ty.Any, force_last: bool = True) -> Address:
        address = self._resolve(key, create=True, force_last=force_last)
        if address is None:
            raise InvalidKeyError(f"Cannot write to key {key!r}; it does not name any path segments.")
        return address

    def exists(self, key: ty.Any) -> bool:
        """Literal top-level keys count even if they contain the separator.

        Checking may force Deferreds on the path, just like reading would.
        """
        if key in self._items or key in self._caches:
            return True
        return self._resolve(key) is not None

    def get(self, key: ty.Any, default: ty.Any = _ABSENT, args: ty.Optional[ty.Sequence] = None) -> ty.Any:
        """Returns the value at the key.

        If there is none, a callable default is called with `args` - every time, as its
        result is not memoized. Any other default is returned as-is. With no default at all,
        you get the store's default_value.
        """
        if key in self._caches:
            return self._caches[key]

        address = self._resolve(key)
        if address is not None:
            value = address.get()
            if not address.transient:
                self._caches[key] = value
            return value

        if callable(default):
            return default(*(args or ()))
        if default is _ABSENT:
            return self.default_value
        return default

    def set(self, key: ty.Any, value: ty.Any) -> None:
        """Overwrites whatever is at the key, creating intermediate mappings as necessary.

        Any leaf in the way of the path gets replaced by a mapping.
        """
        self._resolve_for_write(key).set(_own(value))
        self._caches.pop(key, None)

    def lazy_set(
        self,
        key: ty.Any,
        producer: ty.Callable[..., ty.Any],
        args: ty.Optional[ty.Sequence] = None,
        always: bool = False,
    ) -> None:
        """producer(*args) will be called the first time anything walks through the key.

        With always=True it is called every time instead, and the result is never stored.
        """
        lazy = Deferred(producer, tuple(args or ()), always)
        # whatever was there is being replaced, so there is no point in computing it.
        self._resolve_for_write(key, force_last=False).set(lazy)
        self._caches.pop(key, None)

    def _remove(self, key: ty.Any) -> bool:
        address = self._resolve(key)
        if address is None:
            return False
        address.delete()
        self._caches.pop(key, None)
        return True

    def remove(self, key: ty.Any) -> None:
        """Missing keys are ignored. Deferreds on the way to the key are forced."""
        self._remove(key)

    def clear_cache(self) -> None:
        self._caches.clear()

    def as_dict(self) -> ReadOnlyView:
        """Live but read-only. Deferreds show up unforced."""
        return ReadOnlyView(self._items)

    def flatten(self) -> ty.Dict[str, ty.Any]:
        """A flat snapshot using this store's separator. Nothing gets forced."""
        return flatten(copy_tree(self._items), sep=self.path_separator)

    def __contains__(self, key: ty.Any) -> bool:
        return self.exists(key)

    def __getitem__(self, key: ty.Any) -> ty.Any:
        found = self.get(key, _MISSING)
        if found is _MISSING:
            raise KeyError(key)
        return found

    def __setitem__(self, key: ty.Any, value: ty.Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: ty.Any) -> None:
        if not self._remove(key):
            raise KeyError(key)

    def __repr__(self) -> str:
        return f"PathStore({self._items!r}, path_separator={self.path_separator!r})"
