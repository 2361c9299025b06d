from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Callable, Generic, Iterable, Optional, TypeVar

D = TypeVar('D')
U = TypeVar('U')


@dataclass(frozen=True)
class Algebra(Generic[D, U]):
    """
    The annotation operations a tree needs: an associative `down` on D, an
    associative `up` on U, and a left action `act` of D on U.

    The action must be a monoid homomorphism, i.e.
        act(d, up(u1, u2)) == up(act(d, u1), act(d, u2))
        act(down(d1, d2), u) == act(d1, act(d2, u))
    None of this is checked; an action breaking these laws yields wrong cached
    upward values rather than an error.
    """
    down: Callable[[D, D], D]
    up: Callable[[U, U], U]
    act: Callable[[D, U], U]

    def append_down(self, left: Optional[D], right: Optional[D]) -> Optional[D]:
        if left is None:
            return right
        if right is None:
            return left
        return self.down(left, right)

    def append_up(self, left: Optional[U], right: Optional[U]) -> Optional[U]:
        if left is None:
            return right
        if right is None:
            return left
        return self.up(left, right)

    def concat_up(self, us: Iterable[Optional[U]]) -> Optional[U]:
        return reduce(self.append_up, us, None)

    def act_option(self, d: Optional[D], u: Optional[U]) -> Optional[U]:
        if d is None or u is None:
            return u
        return self.act(d, u)
