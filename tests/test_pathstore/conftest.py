import typing as ty

import pytest

from thds.pathstore import PathStore


class Counted:
    """A producer that remembers how many times (and with what) it was called."""

    def __init__(self, result: ty.Callable[..., ty.Any]):
        self.result = result
        self.calls: ty.List[tuple] = list()

    def __call__(self, *args):
        self.calls.append(args)
        return self.result(*args)


@pytest.fixture
def store() -> PathStore:
    return PathStore()


@pytest.fixture
def db_store() -> PathStore:
    return PathStore(
        {
            "db": {
                "host": "127.0.0.1",
                "username": "admin",
                "password": "qwerty12345",
            }
        }
    )


@pytest.fixture
def counted() -> ty.Callable[[ty.Callable[..., ty.Any]], Counted]:
    return Counted
