"""Turning delimited keys like `db.options.attr` into path segments, and back."""

import typing as ty

DEFAULT_SEP = "."


def split_key(key: ty.Any, sep: str = DEFAULT_SEP) -> ty.Tuple[str, ...]:
    """Splits on every occurrence of the separator. There is no escaping, so a segment can
    never contain the separator itself.

    None and the empty string both have zero segments - they address the root, which is
    never a settable leaf.
    """
    if key is None:
        return ()
    key = str(key)
    if key == "":
        return ()
    return tuple(key.split(sep))


def join_key(segments: ty.Iterable[str], sep: str = DEFAULT_SEP) -> str:
    return sep.join(segments)
