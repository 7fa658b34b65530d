"""Implementation of RulesEngine using python-chess"""

from typing import Optional

import chess

from studytree.core.exceptions import InvalidFENError
from studytree.core.shared_types import Color
from studytree.rules.interfaces import PieceInfo
from studytree.tree.models import Move

STARTING_FEN = chess.STARTING_FEN


def _color_code(color: chess.Color) -> str:
    return (Color.WHITE if color == chess.WHITE else Color.BLACK).value


class PythonChessEngine:
    """Rules engine backed by a python-chess Board."""

    def __init__(self, fen: Optional[str] = None) -> None:
        self.board = chess.Board()
        if fen is not None:
            self.load(fen)

    def reset(self) -> None:
        self.board.reset()

    def load(self, fen: str) -> None:
        try:
            board = chess.Board(fen)
        except ValueError as error:
            raise InvalidFENError(f"Cannot load FEN {fen!r}: {error}") from error
        if not board.is_valid():
            raise InvalidFENError(f"FEN {fen!r} does not describe a legal position: {board.status()!r}")
        self.board = board

    def move(
        self, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> Optional[Move]:
        candidate = self._parse(from_square, to_square, promotion)
        if candidate is None or not self.board.is_legal(candidate):
            return None
        described = self._describe(candidate)
        self.board.push(candidate)
        return described

    def fen(self) -> str:
        return self.board.fen()

    def legal_moves(self, square: Optional[str] = None) -> list[Move]:
        try:
            origin = chess.parse_square(square) if square else None
        except ValueError:
            return []
        return [
            self._describe(move)
            for move in self.board.legal_moves
            if origin is None or move.from_square == origin
        ]

    def piece_at(self, square: str) -> Optional[PieceInfo]:
        try:
            piece = self.board.piece_at(chess.parse_square(square))
        except ValueError:
            return None
        if piece is None:
            return None
        return _color_code(piece.color), chess.piece_symbol(piece.piece_type)

    def turn(self) -> str:
        return _color_code(self.board.turn)

    # -- PRIVATE HELPERS ---
    @staticmethod
    def _parse(
        from_square: str, to_square: str, promotion: Optional[str]
    ) -> Optional[chess.Move]:
        uci = f"{from_square}{to_square}{(promotion or '').lower()}"
        try:
            return chess.Move.from_uci(uci)
        except ValueError:
            return None

    def _describe(self, move: chess.Move) -> Move:
        """Everything about a legal move, computed in the position before it is played."""
        board = self.board
        piece = board.piece_at(move.from_square)
        before = board.fen()

        if board.is_en_passant(move):
            captured: Optional[str] = "p"
        else:
            target = board.piece_at(move.to_square)
            captured = chess.piece_symbol(target.piece_type) if target and not board.is_castling(move) else None

        san = board.san(move)
        board.push(move)
        after = board.fen()
        board.pop()

        return Move(
            from_square=chess.square_name(move.from_square),
            to_square=chess.square_name(move.to_square),
            san=san,
            lan=move.uci(),
            before=before,
            after=after,
            flags=self._flags(move, captured is not None),
            piece=chess.piece_symbol(piece.piece_type),
            color=_color_code(piece.color),
            promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
            captured=captured,
        )

    def _flags(self, move: chess.Move, is_capture: bool) -> str:
        """chess.js style: n normal, b double pawn push, e en passant, c capture, p promotion, k/q castling."""
        board = self.board
        flags = ""
        if board.is_en_passant(move):
            flags += "e"
        elif is_capture:
            flags += "c"
        if move.promotion:
            flags += "p"
        if board.is_kingside_castling(move):
            flags += "k"
        elif board.is_queenside_castling(move):
            flags += "q"
        if (
            board.piece_type_at(move.from_square) == chess.PAWN
            and abs(chess.square_rank(move.to_square) - chess.square_rank(move.from_square)) == 2
        ):
            flags += "b"
        return flags or "n"
