"""
The GameState is the entrypoint into the tree layer for the service layer.
It owns one study in memory: the move tree, where we currently are in it, the comments, and a rules engine
to replay positions with. It is created empty or hydrated from a StudyModel, and turned back into one after every action.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from studytree.core.exceptions import HydrationError, InvalidFENError, StudyError
from studytree.core.models import StudyModel
from studytree.core.shared_types import MutationStatus
from studytree.rules.interfaces import RulesEngine
from studytree.rules.pgn import read_pgn
from studytree.rules.replay import replay_moves
from studytree.tree.comments import CommentOverlay
from studytree.tree.models import Move, MoveTree
from studytree.tree.mutations import add_move, delete_last_move
from studytree.tree.navigation import first_path, last_path, next_path, previous_path
from studytree.tree.paths import START, Path
from studytree.tree.queries import (
    get_absolute_move_index,
    get_continuation_path,
    get_moves_along_path,
    get_node_at_path,
    is_at_end_of_path,
    is_valid_path,
    iter_sequences,
)

_LOGGER = logging.getLogger(__name__)


@dataclass
class GameState:
    # --- TREE LAYER API CALLED BY SERVICE ---

    engine: RulesEngine
    starting_position: str  # FEN the whole tree is replayed from
    position: str  # FEN at current_path
    tree: MoveTree = field(default_factory=MoveTree)
    current_path: Path = START
    is_flipped: bool = False
    comments: CommentOverlay = field(default_factory=CommentOverlay)
    name: str = ""

    @classmethod
    def new(
        cls, engine: RulesEngine, starting_fen: Optional[str] = None, name: str = ""
    ) -> Self:
        """Empty study from the standard starting position, or from starting_fen (raises InvalidFENError)."""
        if starting_fen:
            engine.load(starting_fen)
        else:
            engine.reset()
        fen = engine.fen()
        return cls(engine=engine, starting_position=fen, position=fen, name=name)

    @classmethod
    def from_model(cls, model: StudyModel, engine: RulesEngine) -> Self:
        """
        Hydrate a persisted study.
        ----

        Fails closed: if the starting position, the tree, or the current path cannot be replayed,
        the study is opened at its starting position with an empty tree instead of in a corrupted state.
        """
        try:
            empty = cls.new(engine, model.starting_position, name=model.study_name)
        except InvalidFENError:
            _LOGGER.warning(
                "Study %r has an invalid starting position %r. Opening the standard position.",
                model.study_name,
                model.starting_position,
            )
            return cls.new(engine, name=model.study_name)

        try:
            tree = MoveTree.from_lists(model.move_tree, model.root_branches)
            current_path = tuple(int(index) for index in model.current_path)
        except (HydrationError, TypeError, ValueError) as error:
            _LOGGER.warning("Study %r cannot be decoded (%s). Opening it empty.", model.study_name, error)
            return empty

        state = cls(
            engine=engine,
            starting_position=empty.starting_position,
            position=empty.starting_position,
            tree=tree,
            current_path=current_path,
            is_flipped=model.is_flipped,
            comments=CommentOverlay.from_dict(model.comments),
            name=model.study_name,
        )
        if not state._is_replayable():
            _LOGGER.warning("Study %r does not replay from its starting position. Opening it empty.", model.study_name)
            return cls.new(engine, empty.starting_position, name=model.study_name)
        state.position = engine.fen()
        return state

    def to_model(self) -> StudyModel:
        """Encode back into a format the Service layer uses"""
        move_tree, root_branches = self.tree.to_lists()
        return StudyModel(
            study_name=self.name,
            position=self.position,
            starting_position=self.starting_position,
            move_tree=move_tree,
            root_branches=root_branches,
            current_path=list(self.current_path),
            is_flipped=self.is_flipped,
            comments=self.comments.to_dict(),
        )

    # --- DERIVED INFO ---
    @property
    def current_moves(self) -> list[Move]:
        """Moves leading from the starting position to the current one."""
        return get_moves_along_path(self.tree, self.current_path)

    @property
    def current_move(self) -> Optional[Move]:
        node = get_node_at_path(self.tree, self.current_path)
        return node.move if node else None

    @property
    def ply_index(self) -> int:
        return get_absolute_move_index(self.tree, self.current_path)

    @property
    def is_at_end(self) -> bool:
        return is_at_end_of_path(self.tree, self.current_path)

    @property
    def comment(self) -> str:
        return self.comments.get(self.current_path) or ""

    def legal_moves(self, square: Optional[str] = None) -> list[Move]:
        if not self._load(self.current_path):
            return []
        return self.engine.legal_moves(square)

    # --- ACTIONS ---
    def play_move(
        self, from_square: str, to_square: str, promotion: Optional[str] = None
    ) -> bool:
        """
        Play a move from the current position.
        ----

        1. illegal move: quietly rejected (False), nothing changes
        2. the move is the next move of the current line: just step forward
        3. otherwise: record it (extending the line, re-entering an explored branch, or starting a new one)
        """
        if not self._load(self.current_path):
            _LOGGER.error("Current path %s does not replay, refusing move", self.current_path)
            return False

        played = self.engine.move(from_square, to_square, promotion)
        if played is None:
            _LOGGER.debug("Illegal move %s%s%s in %s", from_square, to_square, promotion or "", self.position)
            return False

        continuation = get_continuation_path(self.tree, self.current_path)
        if continuation is not None:
            next_node = get_node_at_path(self.tree, continuation)
            if next_node is not None and next_node.move.matches(
                played.from_square, played.to_square, played.promotion
            ):
                self.current_path = continuation
                self.position = self.engine.fen()
                return True

        result = add_move(self.tree, self.current_path, played)
        if not result.ok:
            _LOGGER.warning("Could not add %s at %s: %s", played.san, self.current_path, result.status)
            self._load(self.current_path)
            return False

        self.tree = result.tree
        self.current_path = result.new_path
        self.position = self.engine.fen()
        return True

    def undo(self) -> MutationStatus:
        """Delete the current move, which has to be the last move of its line. Its comments go with it."""
        result = delete_last_move(self.tree, self.current_path)
        if not result.ok:
            return result.status

        if not replay_moves(
            self.engine, self.starting_position, get_moves_along_path(result.tree, result.new_path)
        ):
            _LOGGER.error("Position after deleting %s does not replay", self.current_path)
            self._load(self.current_path)
            return MutationStatus.INVALID_PATH

        self.comments.remove_subtree(result.removed_path)
        if result.pruned_branch is not None:
            self.comments.shift_branches(result.pruned_branch.parent, result.pruned_branch.branch_index)
        self.tree = result.tree
        self.current_path = result.new_path
        self.position = self.engine.fen()
        return MutationStatus.OK

    def go_to(self, path: Path) -> bool:
        path = tuple(path)
        if not is_valid_path(self.tree, path) or not self._load(path):
            _LOGGER.debug("Cannot navigate to %s", path)
            self._load(self.current_path)
            return False
        self.current_path = path
        self.position = self.engine.fen()
        return True

    def go_previous(self) -> bool:
        return self._step(previous_path(self.tree, self.current_path))

    def go_next(self) -> bool:
        return self._step(next_path(self.tree, self.current_path))

    def go_to_start(self) -> bool:
        return self._step(START)

    def go_to_end(self) -> bool:
        """Follow the current line (and first branches after it) as far as it goes."""
        return self._step(last_path(self.tree, self.current_path))

    def go_to_first_move(self) -> bool:
        return self._step(first_path(self.tree))

    def flip(self) -> None:
        self.is_flipped = not self.is_flipped

    def set_comment(self, text: str) -> None:
        self.comments.set(self.current_path, text)

    def reset(self) -> None:
        """Start over: empty tree from the standard starting position, no comments, board not flipped."""
        self.engine.reset()
        self._restart()
        self.is_flipped = False

    def load_fen(self, fen: str) -> None:
        """Start over from fen. Raises InvalidFENError and leaves the study untouched if it cannot be loaded."""
        try:
            self.engine.load(fen)
        except StudyError:
            self._load(self.current_path)
            raise
        self._restart()

    def load_pgn(self, pgn: str) -> None:
        """
        Replace the whole study by a PGN game, its variations and comments included.
        ----

        Ends up at the last move of the main line, like after playing the game through.
        Raises InvalidPGNError (or InvalidFENError for a bad FEN header) and leaves the study untouched on failure.
        """
        try:
            imported = read_pgn(self.engine, pgn)
        except StudyError:
            self._load(self.current_path)
            raise

        self.starting_position = imported.starting_fen
        self.tree = imported.tree
        self.comments = CommentOverlay()
        for path, text in imported.comments.items():
            self.comments.set(path, text)
        self.current_path = START if self.tree.is_empty else (len(self.tree.main_line) - 1,)
        self._load(self.current_path)
        self.position = self.engine.fen()

    # -- PRIVATE HELPERS ---
    def _step(self, path: Path) -> bool:
        """Navigate, reporting whether we actually moved."""
        if path == self.current_path:
            return False
        return self.go_to(path)

    def _restart(self) -> None:
        """Empty study from whatever position the engine holds."""
        fen = self.engine.fen()
        self.starting_position = fen
        self.position = fen
        self.tree = MoveTree()
        self.current_path = START
        self.comments = CommentOverlay()

    def _load(self, path: Path) -> bool:
        return replay_moves(self.engine, self.starting_position, get_moves_along_path(self.tree, path))

    def _is_replayable(self) -> bool:
        """Every line of the tree replays, and the current path exists. Leaves the engine at current_path."""
        if not is_valid_path(self.tree, self.current_path):
            return False
        for prefix, sequence in iter_sequences(self.tree):
            if sequence and not self._load(prefix + (len(sequence) - 1,)):
                return False
        return self._load(self.current_path)
