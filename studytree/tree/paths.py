"""
Addressing of nodes in the move tree.
----

A Path is a flat tuple of integers:

* ()                                    -> starting position, no move played
* (main_index,)                         -> after main-line move main_index
* (main_index, b1, k1, b2, k2, ...)     -> follow the main line to main_index, then take move k1 of node.branches[b1], ...
* (ROOT, b1, k1, ...)                   -> same, but starting from MoveTree.root_branches

Functions in this module are purely syntactic: they never look at a tree.
"""

from studytree.core.exceptions import InvalidPathError

Path = tuple[int, ...]

# Sentinel in front of paths that start in the root branches. Never a valid main-line index.
ROOT = -1

# Must not be a character of any numeral (including the minus sign of ROOT)
PATH_DELIMITER = "."

START: Path = ()


def path_to_string(path: Path) -> str:
    """Key used to store per-node data (comments). (1, 2) -> '1.2', (-1, 0, 0) -> '-1.0.0', () -> ''"""
    return PATH_DELIMITER.join(str(index) for index in path)


def path_from_string(key: str) -> Path:
    """Exact inverse of path_to_string."""
    if key == "":
        return START
    try:
        return tuple(int(part) for part in key.split(PATH_DELIMITER))
    except ValueError as error:
        raise InvalidPathError(f"Cannot interpret {key!r} as a move path.") from error


def is_root_path(path: Path) -> bool:
    return len(path) > 0 and path[0] == ROOT


def is_main_line_path(path: Path) -> bool:
    return len(path) == 1 and path[0] >= 0


def get_path_depth(path: Path) -> int:
    """Number of (branch_index, move_index) pairs, i.e. how deeply nested the addressed node is."""
    if not path:
        return 0
    return (len(path) - 1) // 2


def is_well_formed(path: Path) -> bool:
    """Right shape (origin + complete pairs) and no negative index except the leading ROOT."""
    if not path:
        return True
    if len(path) % 2 == 0:
        return False
    if is_root_path(path):
        if len(path) == 1:
            return False
    elif path[0] < 0:
        return False
    return all(index >= 0 for index in path[1:])


def parent_path(path: Path) -> Path:
    """
    Path of the node the addressed node's sequence hangs from.
    ----

    For a node in a branch, drop the trailing (branch_index, move_index) pair.
    Branches directly under ROOT and the main line hang from the starting position.
    """
    if len(path) <= 1:
        return START
    parent = path[:-2]
    if parent == (ROOT,):
        return START
    return parent


def with_last_index(path: Path, index: int) -> Path:
    """Same sequence, other move."""
    return path[:-1] + (index,)


def descend(path: Path, branch_index: int, move_index: int = 0) -> Path:
    """Path into one of the branches attached to the node at path."""
    if not path:
        return (ROOT, branch_index, move_index)
    return path + (branch_index, move_index)
