"""
Read-only queries on a MoveTree.

None of these raise on a malformed or out-of-range path: they return None / -1 / an empty result,
and it is up to the caller (mutations, navigation, GameState) to reject the operation.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from studytree.tree.models import Move, MoveNode, MoveSequence, MoveTree
from studytree.tree.paths import (
    ROOT,
    START,
    Path,
    descend,
    is_root_path,
    is_well_formed,
    with_last_index,
)


@dataclass(frozen=True)
class BranchContext:
    """Where a path ends up: the sequence owning the node, the node's index in it, and the node itself."""

    sequence: MoveSequence
    move_index: int
    node: MoveNode

    @property
    def is_last(self) -> bool:
        return self.move_index == len(self.sequence) - 1


def _walk_branches(
    branches: tuple[MoveSequence, ...], segments: Path
) -> Optional[BranchContext]:
    """Follow (branch_index, move_index) pairs starting from a list of branches."""
    context: Optional[BranchContext] = None
    for position in range(0, len(segments), 2):
        branch_index, move_index = segments[position], segments[position + 1]
        if not 0 <= branch_index < len(branches):
            return None
        sequence = branches[branch_index]
        if not 0 <= move_index < len(sequence):
            return None
        context = BranchContext(sequence, move_index, sequence[move_index])
        branches = context.node.branches
    return context


def get_branch_context(tree: MoveTree, path: Path) -> Optional[BranchContext]:
    """Resolve a path to its owning sequence + node. None for the starting position or an invalid path."""
    path = tuple(path)
    if not path or not is_well_formed(path):
        return None

    if is_root_path(path):
        return _walk_branches(tree.root_branches, path[1:])

    main_index = path[0]
    if main_index >= len(tree.main_line):
        return None
    main_context = BranchContext(tree.main_line, main_index, tree.main_line[main_index])
    if len(path) == 1:
        return main_context
    return _walk_branches(main_context.node.branches, path[1:])


def get_node_at_path(tree: MoveTree, path: Path) -> Optional[MoveNode]:
    context = get_branch_context(tree, path)
    return context.node if context else None


def is_valid_path(tree: MoveTree, path: Path) -> bool:
    """The starting position always exists, any other path must resolve to a node."""
    return not path or get_branch_context(tree, path) is not None


def get_main_line_moves(tree: MoveTree) -> list[Move]:
    return [node.move for node in tree.main_line]


def get_moves_along_path(tree: MoveTree, path: Path) -> list[Move]:
    """
    All moves to replay, from the starting position up to and including the node at path.
    ----

    1. main-line moves 0..main_index (nothing for paths rooted at ROOT)
    2. for every (branch_index, move_index) pair: moves 0..move_index of that branch
    """
    path = tuple(path)
    if get_branch_context(tree, path) is None:
        return []

    if is_root_path(path):
        moves: list[Move] = []
        branches = tree.root_branches
    else:
        main_index = path[0]
        moves = [node.move for node in tree.main_line[: main_index + 1]]
        branches = tree.main_line[main_index].branches

    for position in range(1, len(path), 2):
        sequence = branches[path[position]]
        move_index = path[position + 1]
        moves.extend(node.move for node in sequence[: move_index + 1])
        branches = sequence[move_index].branches
    return moves


def is_at_end_of_path(tree: MoveTree, path: Path) -> bool:
    """
    Can a move played at path extend its line in place?
    ----

    * starting position: only when there is no main line yet
    * otherwise: the addressed node is the last node of the sequence that owns it
    """
    path = tuple(path)
    if not path:
        return len(tree.main_line) == 0
    context = get_branch_context(tree, path)
    if context is None:
        return False
    return context.is_last


def get_branches_at_path(tree: MoveTree, path: Path) -> tuple[MoveSequence, ...]:
    """Alternative continuations from the position at path."""
    path = tuple(path)
    if not path or path == (ROOT,):
        return tree.root_branches
    node = get_node_at_path(tree, path)
    return node.branches if node else ()


def find_matching_branch_at_path(
    tree: MoveTree,
    path: Path,
    from_square: str,
    to_square: str,
    promotion: Optional[str] = None,
) -> Optional[Path]:
    """Path to the first move of an already explored branch starting with this move, if there is one."""
    path = tuple(path)
    if path == (ROOT,):
        path = START
    for branch_index, sequence in enumerate(get_branches_at_path(tree, path)):
        if sequence and sequence[0].move.matches(from_square, to_square, promotion):
            return descend(path, branch_index)
    return None


def get_continuation_path(tree: MoveTree, path: Path) -> Optional[Path]:
    """Next node in the same line (never enters a branch)."""
    path = tuple(path)
    if not path:
        return (0,) if tree.main_line else None
    context = get_branch_context(tree, path)
    if context is None or context.is_last:
        return None
    return with_last_index(path, context.move_index + 1)


def get_absolute_move_index(tree: MoveTree, path: Path) -> int:
    """
    0-based ply count of the node at path, used to number moves.
    ----

    main line: main_index
    every (branch_index, move_index) pair adds move_index + 1, since a branch starts after its parent node.
    Root branches start counting from -1, as if hanging from a node before the first move.
    """
    path = tuple(path)
    if get_branch_context(tree, path) is None:
        return -1
    absolute_index = path[0]
    for position in range(2, len(path), 2):
        absolute_index += path[position] + 1
    return absolute_index


def iter_sequences(tree: MoveTree) -> Iterator[tuple[Path, MoveSequence]]:
    """
    Every sequence of the tree at any depth, main line first.
    ----

    Each sequence comes with its path prefix: node k of the sequence lives at prefix + (k,).
    The main line has prefix (), root branch i has (ROOT, i), branch j of the node at p has p + (j,).
    """
    yield START, tree.main_line
    for branch_index, sequence in enumerate(tree.root_branches):
        yield from _iter_with_nested((ROOT, branch_index), sequence)
    for main_index, node in enumerate(tree.main_line):
        for branch_index, sequence in enumerate(node.branches):
            yield from _iter_with_nested((main_index, branch_index), sequence)


def _iter_with_nested(
    prefix: Path, sequence: MoveSequence
) -> Iterator[tuple[Path, MoveSequence]]:
    yield prefix, sequence
    for move_index, node in enumerate(sequence):
        for branch_index, nested in enumerate(node.branches):
            yield from _iter_with_nested(prefix + (move_index, branch_index), nested)


def iter_node_paths(tree: MoveTree) -> Iterator[Path]:
    """Path of every node in the tree."""
    for prefix, sequence in iter_sequences(tree):
        for move_index in range(len(sequence)):
            yield prefix + (move_index,)
