"""Requests and Response models, plus the wire shape of a persisted study"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from studytree.core.exceptions import InvalidRequestError
from studytree.core.models import StudyModel
from studytree.core.shared_types import Color, NavigationTarget, PieceType
from studytree.tree.paths import ROOT

CommentKey = str
CommentText = str


def _validate_fen_structure(value: Optional[str]) -> Optional[str]:
    """Cheap structural check. Whether the position makes sense is up to the rules engine."""
    if value is None:
        return value

    parts = value.strip().split(" ")
    if len(parts) != 6:
        raise InvalidRequestError("FEN string must contain 6 space-separated parts.")
    return value.strip()


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False

    first_character = value[0]
    second_character = value[1]
    return first_character in "abcdefgh" and second_character in "12345678"


# --- WIRE MODELS ---
class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MoveModel(WireModel):
    from_square: str = Field(alias="from")
    to_square: str = Field(alias="to")
    promotion: Optional[str] = None
    san: str
    lan: str
    before: str
    after: str
    captured: Optional[str] = None
    flags: str
    piece: str
    color: str

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        if value not in {color.value for color in Color}:
            raise InvalidRequestError(f"Move color must be 'w' or 'b', got {value!r}.")
        return value


class MoveNodeModel(WireModel):
    move: MoveModel
    branches: list[list["MoveNodeModel"]] = Field(default_factory=list)


MoveNodeModel.model_rebuild()


class StudyRecord(WireModel):
    """The game state of a study as it is stored / sent to a client."""

    position: str
    move_tree: list[MoveNodeModel] = Field(default_factory=list)
    root_branches: list[list[MoveNodeModel]] = Field(default_factory=list)
    starting_position: str
    current_path: list[int] = Field(default_factory=list)
    is_flipped: bool = False
    comments: dict[CommentKey, CommentText] = Field(default_factory=dict)

    @classmethod
    def from_model(cls, model: StudyModel) -> Self:
        return cls.model_validate(
            {
                "position": model.position,
                "moveTree": model.move_tree,
                "rootBranches": model.root_branches,
                "startingPosition": model.starting_position,
                "currentPath": model.current_path,
                "isFlipped": model.is_flipped,
                "comments": model.comments,
            }
        )

    def to_model(self, study_name: str) -> StudyModel:
        """Plain-dict tree, using the same keys as the wire format."""
        return StudyModel(
            study_name=study_name,
            position=self.position,
            starting_position=self.starting_position,
            move_tree=[node.model_dump(by_alias=True, exclude_none=True) for node in self.move_tree],
            root_branches=[
                [node.model_dump(by_alias=True, exclude_none=True) for node in branch]
                for branch in self.root_branches
            ],
            current_path=list(self.current_path),
            is_flipped=self.is_flipped,
            comments=dict(self.comments),
        )


# --- REQUEST MODELS ---
class CreateStudyRequest(BaseModel):
    study_name: str
    starting_fen: Optional[str] = None
    game_state: Optional[StudyRecord] = None  # import an existing study instead of starting empty

    @field_validator("study_name")
    @classmethod
    def validate_study_name(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Study name cannot be empty.")
        return value.strip()

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        return _validate_fen_structure(value)


class GetStudyRequest(BaseModel):
    study_id: UUID


class DeleteStudyRequest(BaseModel):
    study_id: UUID


class MoveRequest(BaseModel):
    study_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value


class UndoMoveRequest(BaseModel):
    study_id: UUID


class NavigateRequest(BaseModel):
    study_id: UUID
    target: NavigationTarget
    path: Optional[list[int]] = None

    @model_validator(mode="after")
    def validate_path(self) -> Self:
        if self.target != NavigationTarget.PATH:
            return self
        if self.path is None:
            raise InvalidRequestError("Navigating to a path requires a path.")
        if any(index < 0 for index in self.path[1:]) or (self.path and self.path[0] < ROOT):
            raise InvalidRequestError(f"Path {self.path} contains invalid indices.")
        return self


class CommentRequest(BaseModel):
    study_id: UUID
    text: str


class FlipBoardRequest(BaseModel):
    study_id: UUID


class ResetStudyRequest(BaseModel):
    study_id: UUID


class LoadFenRequest(BaseModel):
    study_id: UUID
    fen: str

    @field_validator("fen")
    @classmethod
    def validate_fen(cls, value: str) -> str:
        return _validate_fen_structure(value)


class LoadPgnRequest(BaseModel):
    study_id: UUID
    pgn: str

    @field_validator("pgn")
    @classmethod
    def validate_pgn(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("PGN text cannot be empty.")
        return value


# --- RESPONSE MODELS ---
class StudyResponse(BaseModel):
    study_id: UUID
    study_name: str
    game_state: StudyRecord
    accepted: bool = True  # False when the action was quietly rejected (illegal move, nothing to undo, ...)
    status: Optional[str] = None
    comment: str = ""
    ply_index: int = -1
    moves_san: list[str] = Field(default_factory=list)
