"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any

# Type aliases to make StudyModel easier to read
CommentKey = str
CommentText = str
JSONNode = dict[str, Any]


@dataclass
class StudyModel:
    """Transport-safe representation of a study used between API, Service, DB, and Tree layers."""

    study_name: str
    position: str
    starting_position: str
    move_tree: list[JSONNode] = field(default_factory=list)
    root_branches: list[list[JSONNode]] = field(default_factory=list)
    current_path: list[int] = field(default_factory=list)
    is_flipped: bool = False
    comments: dict[CommentKey, CommentText] = field(default_factory=dict)
