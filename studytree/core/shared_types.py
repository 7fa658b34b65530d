"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    """Side to move, encoded the way FEN does it."""

    WHITE = "w"
    BLACK = "b"


class PieceType(StrEnum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


class MutationStatus(StrEnum):
    """Outcome of an attempt to change the shape of the move tree."""

    OK = "ok"
    INVALID_PATH = "invalid path"
    NOTHING_TO_UNDO = "nothing to undo"
    NOT_AT_END = "cannot delete non-terminal move"


class NavigationTarget(StrEnum):
    PREVIOUS = "previous"
    NEXT = "next"
    START = "start"
    END = "end"
    PATH = "path"
