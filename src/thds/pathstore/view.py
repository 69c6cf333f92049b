import typing as ty
from collections.abc import Mapping

from .keys import DEFAULT_SEP, join_key


class ReadOnlyView(Mapping):
    """A live, read-only window onto a nested mapping.

    Nested mappings come back wrapped as well, so nothing reachable from the view can be
    used to modify the underlying tree. Everything else - Deferreds included - comes back
    exactly as stored, unforced.
    """

    __slots__ = ("_data",)

    def __init__(self, data: ty.Mapping[str, ty.Any]):
        self._data = data

    def __getitem__(self, key: str) -> ty.Any:
        value = self._data[key]
        if isinstance(value, Mapping):
            return ReadOnlyView(value)
        return value

    def __iter__(self) -> ty.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ReadOnlyView({self._data!r})"

    def to_dict(self) -> ty.Dict[str, ty.Any]:
        """A detached snapshot made of plain dicts."""
        return copy_tree(self._data)


def copy_tree(data: ty.Mapping[str, ty.Any]) -> ty.Dict[str, ty.Any]:
    """Copies every mapping node into a fresh dict. Leaves are shared, not copied."""
    return {k: copy_tree(v) if isinstance(v, Mapping) else v for k, v in data.items()}


def _flatten_gen(
    d: ty.Mapping[str, ty.Any], parents: ty.Tuple[str, ...] = ()
) -> ty.Iterator[ty.Tuple[ty.Tuple[str, ...], ty.Any]]:
    for k, v in d.items():
        path = parents + (k,)
        if isinstance(v, Mapping) and v:
            yield from _flatten_gen(v, path)
        else:
            # empty mappings are kept as leaves, otherwise they would vanish on the way back.
            yield path, v


def flatten(d: ty.Mapping[str, ty.Any], sep: str = DEFAULT_SEP) -> ty.Dict[str, ty.Any]:
    """{"a": {"b": 1}, "c": 2} -> {"a.b": 1, "c": 2}"""
    return {join_key(path, sep): v for path, v in _flatten_gen(d)}
