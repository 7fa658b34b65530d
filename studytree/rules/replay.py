"""Replaying recorded moves through a rules engine."""

import logging
from typing import Iterable

from studytree.core.exceptions import InvalidFENError
from studytree.rules.interfaces import RulesEngine
from studytree.tree.models import Move

_LOGGER = logging.getLogger(__name__)


def replay_moves(engine: RulesEngine, starting_fen: str, moves: Iterable[Move]) -> bool:
    """
    Load starting_fen and play moves one by one.
    ----

    Stops at the first move the engine rejects, or whose recorded FENs (before / after) differ from the ones
    the engine reaches, and reports False. Same when the starting FEN cannot be loaded.
    The engine is then left in whatever position was reached, so callers should reload on failure.
    """
    try:
        engine.load(starting_fen)
    except InvalidFENError:
        _LOGGER.warning("Cannot replay from invalid FEN %r", starting_fen)
        return False

    for ply, move in enumerate(moves):
        played = engine.move(move.from_square, move.to_square, move.promotion)
        if played is None:
            _LOGGER.warning("Replay failed at ply %d: %s is illegal in %s", ply, move.to_uci(), engine.fen())
            return False
        if (played.before, played.after) != (move.before, move.after):
            _LOGGER.warning(
                "Replay failed at ply %d: %s was recorded from %r, not from %r",
                ply,
                move.to_uci(),
                move.before,
                played.before,
            )
            return False
    return True
