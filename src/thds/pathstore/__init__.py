"""Nested configuration addressed by delimited keys, with lazily-computed values."""

from thds.core import meta

from . import keys, resolve, view  # noqa: F401
from .deferred import Deferred, deferred  # noqa: F401
from .store import PATH_SEPARATOR, InvalidKeyError, PathStore  # noqa: F401
from .view import ReadOnlyView  # noqa: F401

__version__ = meta.get_version(__name__)
