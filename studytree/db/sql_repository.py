"""Implementation of (Study)Repository using SQLAlchemy"""

import logging
from copy import deepcopy
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from studytree.core.models import StudyModel
from studytree.db.schema import DBStudy

_LOGGER = logging.getLogger(__name__)


class SQLStudyRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_study(self, study_id: UUID) -> StudyModel | None:
        """Get study by ID, if record exists."""
        study_db = self._fetch_study(study_id)
        if study_db:
            return self._to_model(study_db)
        return None

    def create_study(self, study: StudyModel) -> tuple[StudyModel, UUID]:
        """Store new study and return the stored data + newly created study ID."""

        new_id = uuid4()
        study_db = DBStudy(id=new_id)
        self._copy_into(study, study_db)
        self.db.add(study_db)
        self.db.commit()
        self.db.refresh(study_db)
        _LOGGER.debug("Inserted study %s", new_id)
        return self._to_model(study_db), new_id

    def update_study(self, study_id: UUID, study: StudyModel) -> StudyModel | None:
        """Replace the game state of an existing record."""
        study_db = self._fetch_study(study_id)
        if not study_db:
            return None
        self._copy_into(study, study_db)
        self.db.commit()
        self.db.refresh(study_db)
        return self._to_model(study_db)

    def delete_study(self, study_id: UUID) -> StudyModel | None:
        """Remove a study's record."""
        study_db = self._fetch_study(study_id)
        if not study_db:
            return None
        study_model = self._to_model(study_db)
        self.db.delete(study_db)
        self.db.commit()
        return study_model

    def _fetch_study(self, study_id: UUID) -> DBStudy | None:
        query = select(DBStudy).where(DBStudy.id == study_id)
        return self.db.scalar(query)

    @staticmethod
    def _copy_into(study: StudyModel, study_db: DBStudy) -> None:
        # JSON columns only notice re-assignment, never in-place changes: always hand over fresh copies
        study_db.study_name = study.study_name
        study_db.position = study.position
        study_db.starting_position = study.starting_position
        study_db.move_tree = deepcopy(study.move_tree)
        study_db.root_branches = deepcopy(study.root_branches)
        study_db.current_path = list(study.current_path)
        study_db.is_flipped = study.is_flipped
        study_db.comments = dict(study.comments)

    def _to_model(self, study_db: DBStudy) -> StudyModel:
        """Convert SQLAlchemy model to data transfer model."""
        return StudyModel(
            study_name=study_db.study_name,
            position=study_db.position,
            starting_position=study_db.starting_position,
            move_tree=deepcopy(study_db.move_tree),
            root_branches=deepcopy(study_db.root_branches),
            current_path=list(study_db.current_path),
            is_flipped=study_db.is_flipped,
            comments=dict(study_db.comments),
        )
