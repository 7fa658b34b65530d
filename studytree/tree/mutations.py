"""
The only functions allowed to change the shape of a move tree.
----

Both operations are pure: they return a new MoveTree together with the path the caller should move to.
Only the nodes on the path being mutated are rebuilt (copy-on-write), everything else is shared with the input tree.

Rejected operations (invalid path, undo in the middle of a line, ...) come back as a result with a non-OK status
and the input tree / path untouched, so a caller can never observe a half-applied mutation.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from studytree.core.shared_types import MutationStatus
from studytree.tree.models import Move, MoveNode, MoveSequence, MoveTree
from studytree.tree.paths import (
    ROOT,
    START,
    Path,
    is_root_path,
    parent_path,
    with_last_index,
)
from studytree.tree.queries import (
    find_matching_branch_at_path,
    get_branch_context,
    is_at_end_of_path,
)

_LOGGER = logging.getLogger(__name__)

# Receives the sequence owning the addressed node + the node's index, returns the replacement sequence.
# An empty replacement removes a branch from its parent list.
SequenceEdit = Callable[[MoveSequence, int], MoveSequence]


@dataclass(frozen=True)
class AddMoveResult:
    tree: MoveTree
    new_path: Path
    is_new_branch: bool = False
    status: MutationStatus = MutationStatus.OK

    @property
    def ok(self) -> bool:
        return self.status == MutationStatus.OK


@dataclass(frozen=True)
class PrunedBranch:
    """A branch entry that disappeared: branch number branch_index of the node at parent (ROOT for root branches)."""

    parent: Path
    branch_index: int


@dataclass(frozen=True)
class DeleteMoveResult:
    tree: MoveTree
    new_path: Path
    status: MutationStatus = MutationStatus.OK
    removed_path: Optional[Path] = None
    pruned_branch: Optional[PrunedBranch] = None

    @property
    def ok(self) -> bool:
        return self.status == MutationStatus.OK


# --- PUBLIC API ---
def add_move(tree: MoveTree, path: Path, move: Move) -> AddMoveResult:
    """
    Record a move played from the position at path.
    ----

    1. starting position: the first move of an empty tree starts the main line.
       Otherwise it is an alternative first move and goes to the root branches (reusing one that starts the same way).
    2. last node of its line: extend the line in place.
    3. middle of a line: branch off forward from the addressed node (reusing a branch that starts the same way).
       Existing continuations are never truncated.
    """
    path = tuple(path)

    if not path:
        if not tree.main_line:
            _LOGGER.debug("Starting main line with %s", move.san)
            return AddMoveResult(replace(tree, main_line=(MoveNode(move),)), (0,))
        return _branch_from(tree, START, move)

    context = get_branch_context(tree, path)
    if context is None:
        _LOGGER.debug("Rejected move %s at invalid path %s", move.san, path)
        return AddMoveResult(tree, path, status=MutationStatus.INVALID_PATH)

    if context.is_last:
        new_tree = _edit_sequence(tree, path, lambda sequence, _: sequence + (MoveNode(move),))
        return AddMoveResult(new_tree, with_last_index(path, context.move_index + 1))

    return _branch_from(tree, path, move)


def delete_last_move(tree: MoveTree, path: Path) -> DeleteMoveResult:
    """
    Undo: remove the move at path, which must be the last move of its line.
    ----

    Whatever hangs from the removed node goes with it.
    A branch left without moves is removed from its parent, and the returned path then points at that parent.
    """
    path = tuple(path)

    if not path:
        return DeleteMoveResult(tree, path, MutationStatus.NOTHING_TO_UNDO)

    context = get_branch_context(tree, path)
    if context is None:
        return DeleteMoveResult(tree, path, MutationStatus.INVALID_PATH)
    if not is_at_end_of_path(tree, path):
        return DeleteMoveResult(tree, path, MutationStatus.NOT_AT_END)

    new_tree = _edit_sequence(tree, path, lambda sequence, _: sequence[:-1])
    _LOGGER.debug("Deleted %s at %s", context.node.move.san, path)

    if context.move_index > 0:
        return DeleteMoveResult(
            new_tree, with_last_index(path, context.move_index - 1), removed_path=path
        )

    # main line emptied: nothing to prune, back to the start
    if len(path) == 1 and not is_root_path(path):
        return DeleteMoveResult(new_tree, START, removed_path=path)

    owner = path[:-2]
    pruned = PrunedBranch(parent=owner, branch_index=path[-2])
    return DeleteMoveResult(
        new_tree, parent_path(path), removed_path=path, pruned_branch=pruned
    )


# --- PRIVATE HELPERS ---
def _branch_from(tree: MoveTree, path: Path, move: Move) -> AddMoveResult:
    """Alternative continuation from the position at path (START means: alternative first move)."""
    existing = find_matching_branch_at_path(
        tree, path, move.from_square, move.to_square, move.promotion
    )
    if existing is not None:
        _LOGGER.debug("Move %s already explored at %s", move.san, existing)
        return AddMoveResult(tree, existing)

    new_branch = (MoveNode(move),)
    if not path:
        root_branches = tree.root_branches + (new_branch,)
        new_path = (ROOT, len(root_branches) - 1, 0)
        return AddMoveResult(replace(tree, root_branches=root_branches), new_path, True)

    def attach(sequence: MoveSequence, index: int) -> MoveSequence:
        node = sequence[index]
        return _replace_at(sequence, index, replace(node, branches=node.branches + (new_branch,)))

    new_tree = _edit_sequence(tree, path, attach)
    branch_count = len(get_branch_context(new_tree, path).node.branches)
    _LOGGER.debug("New branch %s at %s", move.san, path)
    return AddMoveResult(new_tree, path + (branch_count - 1, 0), True)


def _replace_at(sequence: tuple, index: int, item) -> tuple:
    return sequence[:index] + (item,) + sequence[index + 1 :]


def _edit_sequence(tree: MoveTree, path: Path, edit: SequenceEdit) -> MoveTree:
    """
    Rebuild the tree with the sequence owning the node at path replaced by edit(sequence, index).
    ----

    path must be valid (checked by the caller). Nodes between the tree's top and that sequence are copied,
    everything else is shared.
    """
    if is_root_path(path):
        return replace(tree, root_branches=_edit_branches(tree.root_branches, path[1:], edit))

    main_index = path[0]
    if len(path) == 1:
        return replace(tree, main_line=edit(tree.main_line, main_index))

    node = tree.main_line[main_index]
    new_node = replace(node, branches=_edit_branches(node.branches, path[1:], edit))
    return replace(tree, main_line=_replace_at(tree.main_line, main_index, new_node))


def _edit_branches(
    branches: tuple[MoveSequence, ...], segments: Path, edit: SequenceEdit
) -> tuple[MoveSequence, ...]:
    branch_index, move_index = segments[0], segments[1]
    sequence = branches[branch_index]

    if len(segments) == 2:
        new_sequence = edit(sequence, move_index)
    else:
        node = sequence[move_index]
        new_node = replace(node, branches=_edit_branches(node.branches, segments[2:], edit))
        new_sequence = _replace_at(sequence, move_index, new_node)

    if not new_sequence:
        return branches[:branch_index] + branches[branch_index + 1 :]
    return _replace_at(branches, branch_index, new_sequence)
