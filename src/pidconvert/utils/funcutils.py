from itertools import chain
from typing import Iterable, Iterator, TypeVar

T = TypeVar('T')


def flatten(ls: Iterable[Iterable[T]]) -> Iterator[T]:
    # flatten([['a.pid'], ['b.pid', 'c.pid']]) --> a.pid b.pid c.pid
    """Flatten one level of nesting."""
    return chain.from_iterable(ls)
