"""
Stepping backwards / forwards through the move tree.

Walking forward always prefers the first available branch over stopping, so repeatedly asking for the next path
from the start walks one complete line (including nested alternatives) before it halts.
"""

from studytree.tree.models import MoveTree
from studytree.tree.paths import START, Path, is_main_line_path, parent_path, with_last_index
from studytree.tree.queries import get_branch_context


def previous_path(tree: MoveTree, path: Path) -> Path:
    """One ply back. Leaving the first move of a branch returns to the node the branch hangs from."""
    path = tuple(path)
    if not path:
        return START
    if is_main_line_path(path):
        return (path[0] - 1,) if path[0] > 0 else START
    if path[-1] > 0:
        return with_last_index(path, path[-1] - 1)
    return parent_path(path)


def next_path(tree: MoveTree, path: Path) -> Path:
    """
    One ply forward.
    ----

    * inside a line: the next node of that line
    * at the end of a line: the first move of the first branch hanging from the current node
    * nothing further (or an invalid path): stay where we are
    """
    path = tuple(path)
    if not path:
        return (0,) if tree.main_line else START

    context = get_branch_context(tree, path)
    if context is None:
        return path
    if not context.is_last:
        return with_last_index(path, context.move_index + 1)
    if context.node.branches:
        return path + (0, 0)
    return path


def first_path(tree: MoveTree) -> Path:
    return (0,) if tree.main_line else START


def last_path(tree: MoveTree, path: Path = START) -> Path:
    """Keep stepping forward from path until next_path stops moving."""
    current = tuple(path)
    while True:
        following = next_path(tree, current)
        if following == current:
            return current
        current = following
