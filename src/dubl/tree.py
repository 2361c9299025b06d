from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional
from dataclasses import dataclass

D = TypeVar('D')
U = TypeVar('U')
B = TypeVar('B')
L = TypeVar('L')


class DUBLTree(ABC, Generic[D, U, B, L]):
    """
    A rose tree with leaf data of type L, optional node data of type B, and two
    monoidal annotations: D travelling down (accumulated along root-to-leaf paths)
    and U travelling up (cached at branches).

    Trees are immutable; every operation returns a new root that shares untouched
    subtrees with its input.
    """
    @abstractmethod
    def depth(self) -> int: ...

    @abstractmethod
    def size(self) -> int: ...


@dataclass(frozen=True)
class Empty(DUBLTree[D, U, B, L]):
    def depth(self) -> int: return 0
    def size(self) -> int: return 0


@dataclass(frozen=True)
class Leaf(DUBLTree[D, U, B, L]):
    u: U
    datum: L

    def depth(self) -> int: return 0
    def size(self) -> int: return 1


@dataclass(frozen=True)
class Branch(DUBLTree[D, U, B, L]):
    down: Optional[D]       # n.b. pending, not yet acted on `up`
    up: Optional[U]
    datum: Optional[B]
    children: tuple[DUBLTree[D, U, B, L], ...]

    def depth(self) -> int:
        deepest, stack = 1, [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((c, level + 1) for c in node.children if isinstance(c, Branch))
        return deepest

    def size(self) -> int:
        count, stack = 0, [self]
        while stack:
            node = stack.pop()
            count += sum(isinstance(c, Leaf) for c in node.children)
            stack.extend(c for c in node.children if isinstance(c, Branch))
        return count
