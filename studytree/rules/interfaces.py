"""Protocol for the chess rules engine (can be implemented with python-chess / a fake for tests / ...)"""

from typing import Optional, Protocol

from studytree.tree.models import Move

# (color, piece type), e.g. ("w", "k")
PieceInfo = tuple[str, str]


class RulesEngine(Protocol):
    """
    Everything the move tree needs to know about chess.
    ----

    The tree never decides on legality itself: positions are replayed through an engine,
    and only moves the engine accepted (and described) are ever stored.
    """

    def reset(self) -> None:
        """Back to the standard starting position."""
        ...

    def load(self, fen: str) -> None:
        """Set up the position from a FEN string. Raises InvalidFENError if that is not possible."""
        ...

    def move(
        self, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> Optional[Move]:
        """Play a move in the current position. Returns None (and leaves the position alone) if it is illegal."""
        ...

    def fen(self) -> str:
        """Current position."""
        ...

    def legal_moves(self, square: Optional[str] = None) -> list[Move]:
        """All legal moves in the current position, optionally only those of the piece on square."""
        ...

    def piece_at(self, square: str) -> Optional[PieceInfo]:
        """Piece on the square, if any."""
        ...

    def turn(self) -> str:
        """'w' or 'b'"""
        ...
