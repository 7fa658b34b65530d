"""Orchestration of communication from API layer to the move tree and persistence layers (and the reverse direction)."""

import logging
from typing import Callable, Optional
from uuid import UUID

from studytree.api.models import (
    CommentRequest,
    CreateStudyRequest,
    DeleteStudyRequest,
    FlipBoardRequest,
    GetStudyRequest,
    LoadFenRequest,
    LoadPgnRequest,
    MoveRequest,
    NavigateRequest,
    ResetStudyRequest,
    StudyRecord,
    StudyResponse,
    UndoMoveRequest,
)
from studytree.core.exceptions import RepositoryError
from studytree.core.models import StudyModel
from studytree.core.shared_types import MutationStatus, NavigationTarget
from studytree.db.repository import StudyRepository
from studytree.rules.interfaces import RulesEngine
from studytree.rules.python_chess_engine import PythonChessEngine
from studytree.tree.state import GameState

_LOGGER = logging.getLogger(__name__)

EngineFactory = Callable[[], RulesEngine]


class StudyService:
    """Orchestration of layers for a chess study."""

    def __init__(
        self,
        repository: StudyRepository,
        engine_factory: EngineFactory = PythonChessEngine,
    ) -> None:
        self.repo = repository
        self.engine_factory = engine_factory

    # -- API routes logic ---
    def create_study(self, request: CreateStudyRequest) -> StudyResponse:
        """Start a new study, either empty or from an exported game state."""
        if request.game_state is not None:
            # Hydrate first: whatever cannot be replayed is dropped before anything gets stored
            imported = request.game_state.to_model(request.study_name)
            state = GameState.from_model(imported, self.engine_factory())
        else:
            state = GameState.new(
                self.engine_factory(), request.starting_fen, name=request.study_name
            )

        stored_study, study_id = self.repo.create_study(state.to_model())
        _LOGGER.info("Created study %s (%r)", study_id, stored_study.study_name)
        return self._create_study_response(study_id, state)

    def get_study(self, request: GetStudyRequest) -> StudyResponse:
        """Retrieve the current state of a study."""
        state = self._load_state(request.study_id)
        return self._create_study_response(request.study_id, state)

    def play_move(self, request: MoveRequest) -> StudyResponse:
        """
        Play a move at the current position of the study.
        ----

        Illegal moves are not an error: the response simply says accepted=False and the state is unchanged.
        """
        state = self._load_state(request.study_id)
        promotion = request.promote_to.value if request.promote_to else None
        accepted = state.play_move(request.from_square, request.to_square, promotion)
        if accepted:
            self._store(request.study_id, state)
        else:
            _LOGGER.info(
                "Rejected move %s%s in study %s", request.from_square, request.to_square, request.study_id
            )
        return self._create_study_response(request.study_id, state, accepted=accepted)

    def undo_move(self, request: UndoMoveRequest) -> StudyResponse:
        """Delete the last move of the current line (only allowed at the end of that line)."""
        state = self._load_state(request.study_id)
        status = state.undo()
        accepted = status == MutationStatus.OK
        if accepted:
            self._store(request.study_id, state)
        return self._create_study_response(
            request.study_id, state, accepted=accepted, status=status
        )

    def navigate(self, request: NavigateRequest) -> StudyResponse:
        """Move through the tree without changing it."""
        state = self._load_state(request.study_id)
        match request.target:
            case NavigationTarget.PREVIOUS:
                moved = state.go_previous()
            case NavigationTarget.NEXT:
                moved = state.go_next()
            case NavigationTarget.START:
                moved = state.go_to_start()
            case NavigationTarget.END:
                moved = state.go_to_end()
            case NavigationTarget.PATH:
                moved = state.go_to(tuple(request.path or ()))

        if moved:
            self._store(request.study_id, state)
        return self._create_study_response(request.study_id, state, accepted=moved)

    def set_comment(self, request: CommentRequest) -> StudyResponse:
        """Annotate the current position. An empty text removes the annotation."""
        state = self._load_state(request.study_id)
        state.set_comment(request.text)
        self._store(request.study_id, state)
        return self._create_study_response(request.study_id, state)

    def flip_board(self, request: FlipBoardRequest) -> StudyResponse:
        state = self._load_state(request.study_id)
        state.flip()
        self._store(request.study_id, state)
        return self._create_study_response(request.study_id, state)

    def reset_study(self, request: ResetStudyRequest) -> StudyResponse:
        """Empty the study: standard starting position, no moves, no comments."""
        state = self._load_state(request.study_id)
        state.reset()
        self._store(request.study_id, state)
        _LOGGER.info("Reset study %s", request.study_id)
        return self._create_study_response(request.study_id, state)

    def load_fen(self, request: LoadFenRequest) -> StudyResponse:
        """Empty the study and start it from another position (InvalidFENError if the position cannot be loaded)."""
        state = self._load_state(request.study_id)
        state.load_fen(request.fen)
        self._store(request.study_id, state)
        _LOGGER.info("Study %s restarted from %s", request.study_id, state.starting_position)
        return self._create_study_response(request.study_id, state)

    def load_pgn(self, request: LoadPgnRequest) -> StudyResponse:
        """Replace the study's moves and comments by a PGN game (InvalidPGNError if it cannot be read)."""
        state = self._load_state(request.study_id)
        state.load_pgn(request.pgn)
        self._store(request.study_id, state)
        _LOGGER.info("Loaded PGN into study %s (%d main-line moves)", request.study_id, len(state.tree.main_line))
        return self._create_study_response(request.study_id, state)

    def delete_study(self, request: DeleteStudyRequest) -> None:
        """Handle a request to delete a study record."""
        if self.repo.delete_study(request.study_id) is None:
            raise RepositoryError(f"Study with {request.study_id=} not found.")
        _LOGGER.info("Deleted study %s", request.study_id)

    # -- Internal helpers --
    def _create_study_response(
        self,
        study_id: UUID,
        state: GameState,
        accepted: bool = True,
        status: Optional[MutationStatus] = None,
    ) -> StudyResponse:
        """Convert a GameState to a StudyResponse (for study with given ID.)"""
        return StudyResponse(
            study_id=study_id,
            study_name=state.name,
            game_state=StudyRecord.from_model(state.to_model()),
            accepted=accepted,
            status=status.value if status else None,
            comment=state.comment,
            ply_index=state.ply_index,
            moves_san=[move.san for move in state.current_moves],
        )

    def _load_state(self, study_id: UUID) -> GameState:
        return GameState.from_model(self._fetch_study(study_id), self.engine_factory())

    def _store(self, study_id: UUID, state: GameState) -> None:
        if self.repo.update_study(study_id, state.to_model()) is None:
            raise RepositoryError(f"Study with {study_id=} could not be updated.")

    def _fetch_study(self, study_id: UUID) -> StudyModel:
        """Attempt to find the study in the repository and raise error if it fails."""
        study_model = self.repo.get_study(study_id)
        if study_model is None:
            raise RepositoryError(f"Study with {study_id=} not found.")
        return study_model
