"""
Value types of the move tree.
----

A study is a tree of alternative continuations:

* the main line is a sequence of MoveNodes (the first recorded line of play)
* every MoveNode may carry branches: alternative sequences starting from the position AFTER that node's move
* alternatives to the very first move have no node to attach to, so they live in MoveTree.root_branches

All types are frozen. Mutations (see mutations.py) build new trees and share every untouched subtree with the old one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Self

from studytree.core.exceptions import HydrationError

# Keys of a move as it appears on the wire / in the database
REQUIRED_MOVE_KEYS = ("from", "to", "san", "lan", "before", "after", "flags", "piece", "color")


def _optional_text(value: Any) -> Optional[str]:
    return str(value) if value else None


@dataclass(frozen=True)
class Move:
    """A move as produced by the rules engine. Carries everything needed to display and replay it."""

    from_square: str
    to_square: str
    san: str
    lan: str
    before: str  # FEN before the move
    after: str  # FEN after the move
    flags: str
    piece: str
    color: str  # side that made the move: "w" or "b"
    promotion: Optional[str] = None
    captured: Optional[str] = None

    def matches(
        self, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> bool:
        """Same origin, destination and promotion piece. A missing promotion equals an empty one."""
        return (
            self.from_square == from_square
            and self.to_square == to_square
            and (self.promotion or "") == (promotion or "")
        )

    def to_uci(self) -> str:
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        if not isinstance(data, dict):
            raise HydrationError(f"Cannot interpret {data!r} as a move.")
        missing = [key for key in REQUIRED_MOVE_KEYS if key not in data]
        if missing:
            raise HydrationError(f"Move is missing required keys: {', '.join(missing)}")
        return cls(
            from_square=str(data["from"]),
            to_square=str(data["to"]),
            san=str(data["san"]),
            lan=str(data["lan"]),
            before=str(data["before"]),
            after=str(data["after"]),
            flags=str(data["flags"]),
            piece=str(data["piece"]),
            color=str(data["color"]),
            promotion=_optional_text(data.get("promotion")),
            captured=_optional_text(data.get("captured")),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "from": self.from_square,
            "to": self.to_square,
            "san": self.san,
            "lan": self.lan,
            "before": self.before,
            "after": self.after,
            "flags": self.flags,
            "piece": self.piece,
            "color": self.color,
        }
        # optional keys are left out instead of being sent as null
        if self.promotion:
            data["promotion"] = self.promotion
        if self.captured:
            data["captured"] = self.captured
        return data


@dataclass(frozen=True)
class MoveNode:
    move: Move
    branches: tuple[MoveSequence, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        if not isinstance(data, dict) or "move" not in data:
            raise HydrationError(f"Cannot interpret {data!r} as a move node.")
        return cls(
            move=Move.from_dict(data["move"]),
            branches=sequences_from_list(data.get("branches") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "move": self.move.to_dict(),
            "branches": sequences_to_list(self.branches),
        }


# One continuous line of play (main line or a branch)
MoveSequence = tuple[MoveNode, ...]


def sequence_from_list(nodes: Iterable[dict[str, Any]]) -> MoveSequence:
    return tuple(MoveNode.from_dict(node) for node in nodes)


def sequences_from_list(sequences: Iterable[Iterable[dict[str, Any]]]) -> tuple[MoveSequence, ...]:
    """Decode a list of branches. Empty branches are dropped: they must never be observable."""
    decoded = (sequence_from_list(sequence) for sequence in sequences)
    return tuple(sequence for sequence in decoded if sequence)


def sequence_to_list(sequence: MoveSequence) -> list[dict[str, Any]]:
    return [node.to_dict() for node in sequence]


def sequences_to_list(sequences: Iterable[MoveSequence]) -> list[list[dict[str, Any]]]:
    return [sequence_to_list(sequence) for sequence in sequences]


@dataclass(frozen=True)
class MoveTree:
    """Main line + the alternatives to the first main-line move."""

    main_line: MoveSequence = ()
    root_branches: tuple[MoveSequence, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.main_line and not self.root_branches

    @classmethod
    def from_lists(
        cls,
        main_line: Iterable[dict[str, Any]],
        root_branches: Iterable[Iterable[dict[str, Any]]] = (),
    ) -> Self:
        """Decode the JSON-like shape used by the persistence layer."""
        return cls(
            main_line=sequence_from_list(main_line),
            root_branches=sequences_from_list(root_branches),
        )

    def to_lists(self) -> tuple[list[dict[str, Any]], list[list[dict[str, Any]]]]:
        return sequence_to_list(self.main_line), sequences_to_list(self.root_branches)
