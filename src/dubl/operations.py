from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from .algebra import Algebra
from .tree import DUBLTree, Empty, Leaf, Branch, D, U, B, L

R = TypeVar('R')
V = TypeVar('V')
U2 = TypeVar('U2')
L2 = TypeVar('L2')


# Construction

def leaf(u: U, datum: L) -> DUBLTree[D, U, B, L]:
    return Leaf(u, datum)


def branch(
        algebra: Algebra[D, U],
        down: Optional[D],
        datum: Optional[B],
        children: Iterable[DUBLTree[D, U, B, L]]) -> DUBLTree[D, U, B, L]:
    """Build a branch whose cached upward annotation combines those of its children, left to right."""
    children = tuple(children)
    return Branch(down, algebra.concat_up(get_u(algebra, c) for c in children), datum, children)


def branch_gen(algebra: Algebra[D, U], children: Iterable[DUBLTree[D, U, B, L]]) -> DUBLTree[D, U, B, L]:
    return branch(algebra, None, None, children)


def combine(algebra: Algebra[D, U], left: DUBLTree[D, U, B, L], right: DUBLTree[D, U, B, L]) -> DUBLTree[D, U, B, L]:
    """
    Adjoin two trees under a common parent, with Empty acting as identity on either side.

    This is associative only up to `flatten`: regrouping changes the shape of the
    result, so `combine(a, combine(b, c)) != combine(combine(a, b), c)` structurally.
    Folds that should be insensitive to grouping must not observe the branch structure.
    """
    match left, right:
        case Empty(), _: return right
        case _, Empty(): return left
        case _: return branch_gen(algebra, (left, right))


def combine_all(algebra: Algebra[D, U], trees: Iterable[DUBLTree[D, U, B, L]]) -> DUBLTree[D, U, B, L]:
    """Put all trees under a single generic parent. Same associativity caveat as `combine`."""
    return branch_gen(algebra, trees)


# Accessors

def get_u(algebra: Algebra[D, U], tree: DUBLTree[D, U, B, L]) -> Optional[U]:
    """
    The upward annotation at the root, or None if the tree is empty. A pending
    downward annotation at the root is acted on the cached value at every read.
    """
    match tree:
        case Empty(): return None
        case Leaf(u, _): return u
        case Branch(None, up, _, _): return up
        case Branch(down, up, _, _): return algebra.act_option(down, up)
        case _: raise ValueError(f'Not a tree: {tree!r}')


def get_u_field(
        tree: DUBLTree[D, Mapping[str, V], B, L],
        label: str,
        act: Callable[[D, V], V],
        empty: V) -> V:
    """
    Project a single labelled component out of the upward annotation at the root.

    Only an action of D on the component is needed, not on the whole record.
    Missing components (and an absent cache under a pending downward annotation)
    read as `empty`.
    """
    match tree:
        case Empty():
            return empty
        case Leaf(u, _):
            return u.get(label, empty)
        case Branch(None, up, _, _):
            return empty if up is None else up.get(label, empty)
        case Branch(_, None, _, _):
            return empty
        case Branch(down, up, _, _):
            component = up.get(label)
            return empty if component is None else act(down, component)
        case _:
            raise ValueError(f'Not a tree: {tree!r}')


def leaves(tree: DUBLTree[D, U, B, L]) -> list[L]:
    found, stack = [], [tree]
    while stack:
        match node := stack.pop():
            case Empty(): pass
            case Leaf(_, datum): found.append(datum)
            case Branch(_, _, _, children): stack.extend(reversed(children))
            case _: raise ValueError(f'Not a tree: {node!r}')
    return found


# Modification

def apply_d(algebra: Algebra[D, U], d: D, tree: DUBLTree[D, U, B, L]) -> DUBLTree[D, U, B, L]:
    """
    Add a downward annotation at the root, on the left of any existing one.

    Upward annotations below are conceptually acted on by `d`, but the action is
    only computed on reads (`get_u`, `fold`).
    """
    match tree:
        case Branch(down, up, datum, children):
            return Branch(algebra.append_down(d, down), up, datum, children)
        case _:
            return Branch(d, get_u(algebra, tree), None, (tree,))


def apply_u_pre(algebra: Algebra[D, U], u: U, tree: DUBLTree[D, U, B, L]) -> DUBLTree[D, U, B, L]:
    """Combine `u` on the left of the upward annotation at the root."""
    match tree:
        case Empty():
            return Branch(None, u, None, ())
        case Leaf(u_leaf, datum):
            return Leaf(algebra.up(u, u_leaf), datum)
        case Branch(None, up, datum, children):
            return Branch(None, algebra.append_up(u, up), datum, children)
        case Branch():
            return Branch(None, algebra.append_up(u, get_u(algebra, tree)), None, (tree,))
        case _:
            raise ValueError(f'Not a tree: {tree!r}')


def apply_u_post(algebra: Algebra[D, U], u: U, tree: DUBLTree[D, U, B, L]) -> DUBLTree[D, U, B, L]:
    """Combine `u` on the right of the upward annotation at the root."""
    match tree:
        case Empty():
            return Branch(None, u, None, ())
        case Leaf(u_leaf, datum):
            return Leaf(algebra.up(u_leaf, u), datum)
        case Branch(None, up, datum, children):
            return Branch(None, algebra.append_up(up, u), datum, children)
        case Branch():
            return Branch(None, algebra.append_up(get_u(algebra, tree), u), None, (tree,))
        case _:
            raise ValueError(f'Not a tree: {tree!r}')


def map_u(f: Callable[[U], U2], tree: DUBLTree[D, U, B, L]) -> DUBLTree[D, U2, B, L]:
    """
    Apply `f` to every stored upward annotation.

    `f` must be a monoid homomorphism that commutes with the action,
    i.e. f(act(d, u)) == act(d, f(u)); otherwise the caches go stale silently.
    """
    mapped = _walk(
        tree,
        lambda _, node: Leaf(f(node.u), node.datum),
        lambda _, node, results: Branch(
            node.down, None if node.up is None else f(node.up), node.datum, _keep_empty(node, results)))
    return tree if mapped is None else mapped


def map_leaves(f: Callable[[L], L2], tree: DUBLTree[D, U, B, L]) -> DUBLTree[D, U, B, L2]:
    mapped = _walk(
        tree,
        lambda _, node: Leaf(node.u, f(node.datum)),
        lambda _, node, results: Branch(node.down, node.up, node.datum, _keep_empty(node, results)))
    return tree if mapped is None else mapped


# Elimination

def _walk(
        tree: DUBLTree[D, U, B, L],
        on_leaf: Callable[[Any, Leaf], R],
        on_branch: Callable[[Any, Branch, list[Optional[R]]], R],
        enter: Callable[[Any, Branch], Any] = lambda acc, _: acc) -> Optional[R]:
    """
    Post-order traversal on an explicit stack, so depth is bounded by memory only.

    `enter` derives the accumulator a branch passes to its children; `on_branch`
    sees that same accumulator. Empty subtrees produce None.
    """
    results: list[Optional[R]] = []
    stack: list[tuple[DUBLTree, Any, bool]] = [(tree, None, False)]
    while stack:
        node, acc, visited = stack.pop()
        match node:
            case Empty():
                results.append(None)
            case Leaf():
                results.append(on_leaf(acc, node))
            case Branch(children=children) if visited:
                split = len(results) - len(children)
                below = results[split:]
                del results[split:]
                results.append(on_branch(acc, node, below))
            case Branch(children=children):
                inner = enter(acc, node)
                stack.append((node, inner, True))
                stack.extend((child, inner, False) for child in reversed(children))
            case _:
                raise ValueError(f'Not a tree: {node!r}')
    return results[0]


def _keep_empty(node: Branch, results: list) -> tuple[DUBLTree, ...]:
    return tuple(child if result is None else result for child, result in zip(node.children, results))


def fold(
        algebra: Algebra[D, U],
        leaf_fn: Callable[[Optional[D], U, L], R],
        branch_fn: Callable[[Optional[D], Optional[U], Optional[B], list[Optional[R]]], R],
        tree: DUBLTree[D, U, B, L]) -> Optional[R]:
    """
    Generic fold; returns None iff the tree is empty.

    :param leaf_fn: called with the combination of all downward annotations above
        the leaf, the leaf's upward annotation acted on by that combination, and the
        leaf datum.
    :param branch_fn: called with the branch's own downward annotation, its cached
        upward annotation acted on by everything accumulated down to and including
        the branch, the branch datum, and the results for its children (None for
        empty children).
    """
    return _walk(
        tree,
        lambda dacc, node: leaf_fn(dacc, algebra.act_option(dacc, node.u), node.datum),
        lambda dacc, node, results: branch_fn(node.down, algebra.act_option(dacc, node.up), node.datum, results),
        lambda dacc, node: algebra.append_down(dacc, node.down))


def flatten(algebra: Algebra[D, U], tree: DUBLTree[D, U, B, L]) -> list[tuple[L, Optional[D]]]:
    """Leaf data in left-to-right order, each paired with the downward annotation accumulated above it."""
    # branches return their children's results unmerged; pairs are tuples, groups are lists
    nested = fold(algebra, lambda d, _, datum: (datum, d), lambda _d, _u, _b, results: results, tree)
    flat, stack = [], [nested]
    while stack:
        match item := stack.pop():
            case None: pass
            case list(): stack.extend(reversed(item))
            case _: flat.append(item)
    return flat
