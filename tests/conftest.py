import operator
from itertools import count
from random import Random

import pytest

from dubl import Algebra, leaf, branch, combine, apply_d, Empty


# =============================================================================
# Algebras
# =============================================================================

def _prefix_paths(d: tuple[str, ...], u: tuple[tuple[str, ...], ...]) -> tuple[tuple[str, ...], ...]:
    return tuple(d + path for path in u)


def _merge_extents(left: tuple[int, int], right: tuple[int, int]) -> tuple[int, int]:
    return min(left[0], right[0]), max(left[1], right[1])


def _shift_extent(d: int, u: tuple[int, int]) -> tuple[int, int]:
    return u[0] + d, u[1] + d


# Integers under addition, acting by addition. Not a homomorphism on sums,
# so only fit for reading root annotations.
ADDITIVE = Algebra(down=operator.add, up=operator.add, act=operator.add)

# D: integer offsets, U: (lo, hi) extents; offsets shift extents.
EXTENTS = Algebra(down=operator.add, up=_merge_extents, act=_shift_extent)

# D: tag sequences, U: sequences of tag paths; D prefixes every path in U.
# Neither side is commutative, so ordering mistakes show up.
PATHS = Algebra(down=operator.add, up=operator.add, act=_prefix_paths)


@pytest.fixture
def additive() -> Algebra:
    return ADDITIVE


@pytest.fixture
def paths() -> Algebra:
    return PATHS


@pytest.fixture
def extents() -> Algebra:
    return EXTENTS


# =============================================================================
# Random trees
# =============================================================================

class TreeGen:
    """Seeded random trees over either test algebra, built only through the public constructors."""

    def __init__(self, algebra: Algebra, seed: int, max_depth: int = 4, max_children: int = 4):
        self.algebra = algebra
        self.rng = Random(seed)
        self.max_depth = max_depth
        self.max_children = max_children
        self.names = count()

    def d(self):
        if self.algebra is PATHS:
            return (self.rng.choice('pqrs'),)
        return self.rng.randint(-5, 20)

    def leaf(self):
        name = f'l{next(self.names)}'
        if self.algebra is PATHS:
            return leaf(((name,),), name)
        lo = self.rng.randint(0, 9)
        return leaf((lo, lo + self.rng.randint(0, 5)), name)

    def tree(self, depth: int = 0):
        if depth >= self.max_depth:
            return self.leaf()
        match self.rng.choices(('leaf', 'empty', 'branch', 'combine', 'apply_d'), weights=(3, 1, 3, 2, 2))[0]:
            case 'leaf':
                return self.leaf()
            case 'empty':
                return Empty()
            case 'branch':
                down = self.d() if self.rng.random() < 0.5 else None
                children = [self.tree(depth + 1) for _ in range(self.rng.randint(0, self.max_children))]
                return branch(self.algebra, down, f'b{next(self.names)}', children)
            case 'combine':
                return combine(self.algebra, self.tree(depth + 1), self.tree(depth + 1))
            case 'apply_d':
                return apply_d(self.algebra, self.d(), self.tree(depth + 1))


@pytest.fixture(params=['extents', 'paths'])
def gen_factory(request):
    algebra = EXTENTS if request.param == 'extents' else PATHS
    return lambda seed, **kwargs: TreeGen(algebra, seed, **kwargs)
