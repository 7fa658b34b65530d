"""
Custom exceptions shared by all layers.

Expected, recoverable user actions (illegal moves, undo in the middle of a line, ...) are NOT exceptions:
the tree engine reports those as typed results. Exceptions are raised at layer boundaries only.
"""


class StudyError(Exception):
    """Top-level exception for anything going wrong in a study."""


class InvalidFENError(StudyError):
    """FEN string could not be loaded by the rules engine."""


class InvalidPathError(StudyError, ValueError):
    """Text could not be decoded into a move path."""


class InvalidRequestError(StudyError):
    """Incoming request data is structurally invalid."""


class HydrationError(StudyError):
    """Persisted study data cannot be turned back into a game state."""


class RepositoryError(StudyError):
    """Persistence layer could not find / store the requested record."""


class InvalidPGNError(StudyError):
    """PGN text could not be read into a move tree."""
