"""Unit tests for studytree/api/models.py"""

from uuid import UUID, uuid4

import pytest

from studytree.api.models import (
    CreateStudyRequest,
    LoadFenRequest,
    LoadPgnRequest,
    MoveModel,
    MoveRequest,
    NavigateRequest,
    StudyRecord,
)
from studytree.core.exceptions import InvalidRequestError
from studytree.core.models import StudyModel
from studytree.core.shared_types import NavigationTarget

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

WIRE_MOVE = {
    "from": "e2",
    "to": "e4",
    "san": "e4",
    "lan": "e2e4",
    "before": STARTING_FEN,
    "after": "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1",
    "flags": "b",
    "piece": "p",
    "color": "w",
}


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateStudyRequest --
def test_valid_fen() -> None:
    request = CreateStudyRequest(study_name="Ruy Lopez", starting_fen=f"  {STARTING_FEN} ")
    assert request.starting_fen == STARTING_FEN


def test_starting_fen_is_optional() -> None:
    request = CreateStudyRequest(study_name="Ruy Lopez")
    assert request.starting_fen is None
    assert request.game_state is None


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # only 5 space-separated values
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 extra",  # too many space-separated values
    ],
)
def test_invalid_fen(invalid_fen: str) -> None:
    """Structurally invalid FEN: more or less than 6 space-separated fields."""
    with pytest.raises(InvalidRequestError):
        _ = CreateStudyRequest(study_name="Ruy Lopez", starting_fen=invalid_fen)


@pytest.mark.parametrize("study_name", ["", "   "])
def test_empty_study_name(study_name: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateStudyRequest(study_name=study_name)


# -- Validation - MoveRequest --
def test_valid_square_names(mock_id: UUID) -> None:
    request = MoveRequest(study_id=mock_id, from_square="e7", to_square="e8", promote_to="q")
    assert request.from_square == "e7"
    assert request.to_square == "e8"
    assert request.promote_to == "q"


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than two characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "i1",  # not on the board
        "a9",
    ],
)
def test_invalid_square(mock_id: UUID, square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(study_id=mock_id, from_square=square, to_square="e4")
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(study_id=mock_id, from_square="e2", to_square=square)


# -- Validation - NavigateRequest --
def test_navigate_without_path(mock_id: UUID) -> None:
    request = NavigateRequest(study_id=mock_id, target=NavigationTarget.NEXT)
    assert request.path is None

    with pytest.raises(InvalidRequestError):
        _ = NavigateRequest(study_id=mock_id, target=NavigationTarget.PATH)


@pytest.mark.parametrize("path", [[], [3], [-1, 0, 0], [2, 1, 0]])
def test_navigate_to_path(mock_id: UUID, path: list[int]) -> None:
    request = NavigateRequest(study_id=mock_id, target="path", path=path)
    assert request.path == path


@pytest.mark.parametrize("path", [[-2], [0, -1, 0], [-1, 0, -3]])
def test_navigate_to_negative_path(mock_id: UUID, path: list[int]) -> None:
    with pytest.raises(InvalidRequestError):
        _ = NavigateRequest(study_id=mock_id, target=NavigationTarget.PATH, path=path)


# -- Wire format --
def test_move_uses_chess_js_keys() -> None:
    move = MoveModel.model_validate(WIRE_MOVE)
    assert move.from_square == "e2"
    assert move.to_square == "e4"
    assert move.model_dump(by_alias=True, exclude_none=True) == WIRE_MOVE


def test_move_color_is_validated() -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveModel.model_validate({**WIRE_MOVE, "color": "white"})


def test_study_record_is_camel_case() -> None:
    record = StudyRecord.model_validate(
        {
            "position": WIRE_MOVE["after"],
            "moveTree": [{"move": WIRE_MOVE, "branches": []}],
            "rootBranches": [],
            "startingPosition": STARTING_FEN,
            "currentPath": [0],
            "isFlipped": True,
            "comments": {"0": "King's pawn"},
        }
    )
    assert record.is_flipped
    assert record.move_tree[0].move.san == "e4"

    dumped = record.model_dump(by_alias=True, exclude_none=True)
    assert set(dumped) == {
        "position",
        "moveTree",
        "rootBranches",
        "startingPosition",
        "currentPath",
        "isFlipped",
        "comments",
    }
    assert dumped["moveTree"][0]["move"] == WIRE_MOVE


def test_study_record_model_round_trip() -> None:
    model = StudyModel(
        study_name="Ruy Lopez",
        position=WIRE_MOVE["after"],
        starting_position=STARTING_FEN,
        move_tree=[{"move": WIRE_MOVE, "branches": [[{"move": {**WIRE_MOVE, "san": "d4"}, "branches": []}]]}],
        current_path=[0, 0, 0],
        comments={"": "start"},
    )
    assert StudyRecord.from_model(model).to_model("Ruy Lopez") == model


# -- Validation - LoadFenRequest / LoadPgnRequest --
def test_load_fen_request(mock_id: UUID) -> None:
    assert LoadFenRequest(study_id=mock_id, fen=f" {STARTING_FEN}").fen == STARTING_FEN
    with pytest.raises(InvalidRequestError):
        _ = LoadFenRequest(study_id=mock_id, fen="8/8/8/8/8/8/8/8 w")


@pytest.mark.parametrize("pgn", ["", "  \n "])
def test_empty_pgn(mock_id: UUID, pgn: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = LoadPgnRequest(study_id=mock_id, pgn=pgn)
