"""Protocol repository (implemented with SQLAlchemy in sql_repository.py, with a dictionary in the service tests)"""

from typing import Protocol
from uuid import UUID

from studytree.core.models import StudyModel


class StudyRepository(Protocol):
    """Persistence layer orchestration"""

    def get_study(self, study_id: UUID) -> StudyModel | None:
        """Get study by ID, if record exists."""
        ...

    def create_study(self, study: StudyModel) -> tuple[StudyModel, UUID]:
        """Store new study and return the stored data + newly created study ID."""
        ...

    def update_study(self, study_id: UUID, study: StudyModel) -> StudyModel | None:
        """Replace the game state of an existing record."""
        ...

    def delete_study(self, study_id: UUID) -> StudyModel | None:
        """Remove a study's record."""
        ...
