"""Unit tests for studytree/rules/python_chess_engine.py"""

import chess
import pytest

from studytree.core.exceptions import InvalidFENError
from studytree.rules.python_chess_engine import STARTING_FEN, PythonChessEngine

EN_PASSANT_FEN = "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3"
CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
PROMOTION_FEN = "8/P7/8/8/8/8/8/4k2K w - - 0 1"
CAPTURE_PROMOTION_FEN = "1r6/P7/8/8/8/8/8/4k2K w - - 0 1"
CAPTURE_FEN = "rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2"


def fen_after(fen: str, *uci_moves: str) -> str:
    board = chess.Board(fen)
    for uci in uci_moves:
        board.push_uci(uci)
    return board.fen()


def test_starts_in_standard_position() -> None:
    engine = PythonChessEngine()
    assert engine.fen() == STARTING_FEN
    assert engine.turn() == "w"


def test_legal_move_is_described() -> None:
    engine = PythonChessEngine()
    move = engine.move("e2", "e4")
    assert move is not None
    assert move.from_square == "e2"
    assert move.to_square == "e4"
    assert move.san == "e4"
    assert move.lan == "e2e4"
    assert move.before == STARTING_FEN
    assert move.after == fen_after(STARTING_FEN, "e2e4")
    assert move.flags == "b"
    assert move.piece == "p"
    assert move.color == "w"
    assert move.promotion is None
    assert move.captured is None

    # the move was played
    assert engine.fen() == move.after
    assert engine.turn() == "b"


def test_quiet_piece_move() -> None:
    engine = PythonChessEngine()
    move = engine.move("g1", "f3")
    assert move is not None
    assert (move.san, move.flags, move.piece) == ("Nf3", "n", "n")


@pytest.mark.parametrize(
    "from_square, to_square, promotion",
    [
        ("e2", "e5", None),  # pawn cannot go that far
        ("e7", "e5", None),  # not your turn
        ("e1", "e2", None),  # occupied by own piece
        ("z9", "e4", None),  # not a square
        ("e2", "e4", "x"),  # not a piece
    ],
)
def test_illegal_move_returns_none(from_square: str, to_square: str, promotion) -> None:
    engine = PythonChessEngine()
    assert engine.move(from_square, to_square, promotion) is None
    assert engine.fen() == STARTING_FEN


def test_capture() -> None:
    engine = PythonChessEngine(CAPTURE_FEN)
    move = engine.move("e4", "d5")
    assert move is not None
    assert (move.san, move.flags, move.captured) == ("exd5", "c", "p")


def test_en_passant() -> None:
    engine = PythonChessEngine(EN_PASSANT_FEN)
    move = engine.move("e5", "f6")
    assert move is not None
    assert (move.san, move.flags, move.captured) == ("exf6", "e", "p")


@pytest.mark.parametrize(
    "to_square, expected_san, expected_flags",
    [("g1", "O-O", "k"), ("c1", "O-O-O", "q")],
)
def test_castling(to_square: str, expected_san: str, expected_flags: str) -> None:
    engine = PythonChessEngine(CASTLING_FEN)
    move = engine.move("e1", to_square)
    assert move is not None
    assert (move.san, move.flags, move.piece, move.captured) == (expected_san, expected_flags, "k", None)


def test_promotion() -> None:
    engine = PythonChessEngine(PROMOTION_FEN)
    assert engine.move("a7", "a8") is None  # promotion piece is required

    move = engine.move("a7", "a8", "Q")
    assert move is not None
    assert (move.san, move.flags, move.promotion, move.lan) == ("a8=Q", "p", "q", "a7a8q")


def test_capture_promotion() -> None:
    engine = PythonChessEngine(CAPTURE_PROMOTION_FEN)
    move = engine.move("a7", "b8", "n")
    assert move is not None
    assert (move.san, move.flags, move.promotion, move.captured) == ("axb8=N", "cp", "n", "r")


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "mock mock mock mock mock mock",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
        "8/8/8/8/8/8/8/8 w - - 0 1",  # no kings
    ],
)
def test_load_invalid_fen(invalid_fen: str) -> None:
    engine = PythonChessEngine()
    with pytest.raises(InvalidFENError):
        engine.load(invalid_fen)
    assert engine.fen() == STARTING_FEN


def test_load_and_reset() -> None:
    engine = PythonChessEngine()
    engine.load(CASTLING_FEN)
    assert engine.fen() == CASTLING_FEN
    engine.reset()
    assert engine.fen() == STARTING_FEN


def test_legal_moves() -> None:
    engine = PythonChessEngine()
    assert len(engine.legal_moves()) == 20
    knight_moves = engine.legal_moves("g1")
    assert sorted(move.san for move in knight_moves) == ["Nf3", "Nh3"]
    assert engine.legal_moves("e4") == []
    assert engine.legal_moves("not a square") == []
    # asking does not play anything
    assert engine.fen() == STARTING_FEN


def test_piece_at() -> None:
    engine = PythonChessEngine()
    assert engine.piece_at("e1") == ("w", "k")
    assert engine.piece_at("d8") == ("b", "q")
    assert engine.piece_at("e4") is None
    assert engine.piece_at("i9") is None
