"""
Free-text annotations attached to nodes of the move tree, keyed by path string.

The overlay does not know the tree. The owner (GameState) calls remove_subtree / shift_branches
after every deletion so that annotations never outlive, or end up on the wrong side of, their node.
"""

import logging
from typing import Iterator, Mapping, Optional, Self

from studytree.core.exceptions import InvalidPathError
from studytree.tree.paths import Path, path_from_string, path_to_string

_LOGGER = logging.getLogger(__name__)


class CommentOverlay:
    def __init__(self, comments: Optional[Mapping[str, str]] = None) -> None:
        self._comments: dict[str, str] = dict(comments or {})

    @classmethod
    def from_dict(cls, comments: Optional[Mapping[str, str]]) -> Self:
        """Persisted comments. Entries whose key does not decode into a path, or whose text is not a string, are dropped."""
        if not isinstance(comments, Mapping):
            if comments is not None:
                _LOGGER.warning("Dropping comments stored as %s", type(comments).__name__)
            return cls()

        valid: dict[str, str] = {}
        for key, text in comments.items():
            if not isinstance(key, str) or not isinstance(text, str):
                _LOGGER.warning("Dropping comment %r: %r", key, text)
                continue
            try:
                path = path_from_string(key)
            except InvalidPathError:
                _LOGGER.warning("Dropping comment with invalid key %r", key)
                continue
            if text.strip():
                valid[path_to_string(path)] = text
        return cls(valid)

    def to_dict(self) -> dict[str, str]:
        return dict(self._comments)

    def get(self, path: Path) -> Optional[str]:
        return self._comments.get(path_to_string(tuple(path)))

    def set(self, path: Path, text: str) -> None:
        """Blank text removes the annotation."""
        key = path_to_string(tuple(path))
        if text.strip() == "":
            self._comments.pop(key, None)
        else:
            self._comments[key] = text

    def remove_subtree(self, path: Path) -> None:
        """Drop the annotation of the node at path and of every node nested in branches hanging from it."""
        path = tuple(path)
        for key in list(self._comments):
            if _starts_with(path_from_string(key), path):
                del self._comments[key]

    def shift_branches(self, owner: Path, removed_index: int) -> None:
        """
        Branch removed_index of the node at owner is gone: later sibling branches moved down one index.
        ----

        owner is the path of the node the branches hang from, or (ROOT,) for the root branches.
        """
        owner = tuple(owner)
        depth = len(owner)
        shifted: dict[str, str] = {}
        for key, text in self._comments.items():
            path = path_from_string(key)
            if len(path) > depth and path[:depth] == owner and path[depth] > removed_index:
                path = owner + (path[depth] - 1,) + path[depth + 1 :]
            shifted[path_to_string(path)] = text
        self._comments = shifted

    def __len__(self) -> int:
        return len(self._comments)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, tuple):
            return False
        return path_to_string(path) in self._comments

    def __iter__(self) -> Iterator[tuple[Path, str]]:
        for key, text in self._comments.items():
            yield path_from_string(key), text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommentOverlay):
            return NotImplemented
        return self._comments == other._comments

    def __repr__(self) -> str:
        return f"CommentOverlay({self._comments!r})"


def _starts_with(path: Path, prefix: Path) -> bool:
    return len(path) >= len(prefix) and path[: len(prefix)] == prefix
