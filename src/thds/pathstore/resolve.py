"""Walks a sequence of path segments down through nested mappings.

Rather than handing back the value found at the end of the path, resolution hands back an
Address - the mapping that owns the final segment, plus that segment - so that callers can
read, overwrite or delete the slot without a second walk, and can tell 'missing' apart
from 'present but None'.

Any Deferred encountered along the way gets forced, whether we are reading or writing, and
whether it is at the end of the path or in the middle of it - unless the caller asks for
the final slot to be left alone. Mappings produced by a Deferred are copied into the tree.
"""

import typing as ty
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass

from thds.core import log

from .deferred import Deferred
from .view import copy_tree

logger = log.getLogger(__name__)


@dataclass
class Address:
    container: ty.MutableMapping[str, ty.Any]
    key: str
    transient: bool = False
    # True when the container is a throwaway produced by an always-recompute Deferred
    # somewhere on the path. Nothing read from it should be remembered, and nothing written
    # to it will be seen again.

    def exists(self) -> bool:
        return self.key in self.container

    def get(self) -> ty.Any:
        return self.container[self.key]

    def set(self, value: ty.Any) -> None:
        self.container[self.key] = value

    def delete(self) -> None:
        del self.container[self.key]


def is_scope(value: ty.Any) -> bool:
    """Anything mapping-shaped can be walked into. Everything else is a leaf."""
    return isinstance(value, Mapping)


def _force(
    scope: ty.MutableMapping[str, ty.Any], segment: str, lazy: Deferred
) -> ty.Tuple[ty.MutableMapping[str, ty.Any], ty.Any]:
    """Returns the scope the walk should continue in, and the forced value."""
    logger.debug("Forcing deferred value", segment=segment, always=lazy.always)
    value = lazy.force()
    if isinstance(value, Mapping):
        # the producer may hand out the same mapping every time; the tree gets its own.
        value = copy_tree(value)
    if lazy.always:
        # the real tree keeps the Deferred; the rest of this walk sees only the result.
        return {segment: value}, value
    scope[segment] = value
    return scope, value


def resolve(
    root: ty.MutableMapping[str, ty.Any],
    segments: ty.Sequence[str],
    create: bool = False,
    force_last: bool = True,
) -> ty.Optional[Address]:
    """Finds the slot named by the segments, or returns None if there is no such slot.

    With create=True, missing segments are inserted (holding None until written), and any
    leaf that is in the way of the path is replaced by an empty mapping. Paths win over
    leaves: `set("a.b", 1)` when `a` is currently `"x"` discards the `"x"`. Read-only
    mappings in the way are replaced by writable copies.

    With force_last=False, a Deferred sitting in the final slot is left alone - for
    callers that are about to overwrite it anyway.

    Zero segments never resolve, since there is no final segment to address.
    """
    if not segments:
        return None

    scope = root
    transient = False
    last = len(segments) - 1
    for i, segment in enumerate(segments):
        if segment not in scope:
            if not create:
                return None
            scope[segment] = None

        value = scope[segment]
        if isinstance(value, Deferred) and (force_last or i != last):
            transient = transient or value.always
            scope, value = _force(scope, segment, value)
        if i == last:
            return Address(scope, segment, transient)

        if not is_scope(value):
            if not create:
                return None
            if value is not None:
                logger.debug("Replacing leaf with a mapping to write through it", segment=segment)
            value = scope[segment] = dict()
        elif create and not isinstance(value, MutableMapping):
            value = scope[segment] = copy_tree(value)
        scope = value

    return None  # unreachable; segments is non-empty
