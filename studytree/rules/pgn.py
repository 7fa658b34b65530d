"""
Reading a PGN game (with its variations and comments) into a move tree.

python-chess parses the text. Every move is then played through the RulesEngine,
so the stored moves carry exactly the FENs a later replay will reach.
"""

import io
import logging
from dataclasses import dataclass, field

import chess
import chess.pgn

from studytree.core.exceptions import InvalidPGNError
from studytree.rules.interfaces import RulesEngine
from studytree.tree.models import Move, MoveNode, MoveSequence, MoveTree
from studytree.tree.paths import ROOT, START, Path

_LOGGER = logging.getLogger(__name__)


@dataclass
class ImportedGame:
    starting_fen: str
    tree: MoveTree
    comments: dict[Path, str] = field(default_factory=dict)


def read_pgn(engine: RulesEngine, pgn: str) -> ImportedGame:
    """
    Turn the first game of a PGN text into a tree.
    ----

    * the PGN main line becomes the main line
    * alternatives to the first move become root branches
    * variations after a move hang from that move's node, in PGN order
    * move comments (and the game comment, on the starting position) are kept

    Raises InvalidPGNError when there is no game or python-chess reports errors (illegal or unreadable moves),
    and InvalidFENError when the FEN header cannot be loaded.
    """
    game = chess.pgn.read_game(io.StringIO(pgn))
    if game is None:
        raise InvalidPGNError("No game found in PGN text.")
    if game.errors:
        raise InvalidPGNError(f"Cannot read PGN: {game.errors[0]}")

    engine.load(game.board().fen())
    starting_fen = engine.fen()

    reader = _TreeReader(engine)
    reader.note(START, game.comment)
    main_line: MoveSequence = ()
    if game.variations:
        main_line = reader.read_line(game.variations[0], starting_fen, START)
    root_branches = tuple(
        reader.read_line(variation, starting_fen, (ROOT, branch_index))
        for branch_index, variation in enumerate(game.variations[1:])
    )

    tree = MoveTree(main_line, root_branches)
    _LOGGER.debug(
        "Read PGN: %d main-line moves, %d root branches, %d comments",
        len(main_line),
        len(root_branches),
        len(reader.comments),
    )
    return ImportedGame(starting_fen, tree, reader.comments)


class _TreeReader:
    def __init__(self, engine: RulesEngine) -> None:
        self.engine = engine
        self.comments: dict[Path, str] = {}

    def read_line(
        self, first: chess.pgn.ChildNode, before: str, prefix: Path
    ) -> MoveSequence:
        """The line starting at first, following each node's main variation. Node k ends up at prefix + (k,)."""
        nodes: list[MoveNode] = []
        pgn_node = first
        fen = before
        while pgn_node is not None:
            path = prefix + (len(nodes),)
            move = self._play(fen, pgn_node.move)
            # the other variations are alternatives to the next move: they start after this one
            branches = tuple(
                self.read_line(variation, move.after, path + (branch_index,))
                for branch_index, variation in enumerate(pgn_node.variations[1:])
            )
            self.note(path, pgn_node.comment)
            nodes.append(MoveNode(move, branches))
            fen = move.after
            pgn_node = pgn_node.next()
        return tuple(nodes)

    def note(self, path: Path, comment: str) -> None:
        if comment and comment.strip():
            self.comments[path] = comment.strip()

    def _play(self, fen: str, pgn_move: chess.Move) -> Move:
        self.engine.load(fen)
        uci = pgn_move.uci()
        played = self.engine.move(uci[:2], uci[2:4], uci[4:] or None)
        if played is None:
            raise InvalidPGNError(f"Move {uci} cannot be played in {fen}.")
        return played
