"""
Education article service.
"""

from loguru import logger
from sqlalchemy import update

import models.schemas as schemas
import repositories.db_models as db_models
from services.crud_service import CrudService


class EducationService(CrudService[db_models.Education]):
    model = db_models.Education
    create_schema = schemas.EducationCreate
    update_schema = schemas.EducationUpdate
    resource_name = "Education content"
    name_column = "title"

    def _increment(self, entity_id: int, column: str) -> db_models.Education:
        entity = self.get_or_404(entity_id)
        # Single UPDATE so concurrent readers never lose an increment
        self.db.execute(
            update(db_models.Education)
            .where(db_models.Education.id == entity_id)
            .values({column: getattr(db_models.Education, column) + 1})
        )
        return self._commit(entity)

    def get_by_id(self, entity_id: int) -> db_models.Education:
        """Get an article and count the view."""
        return self._increment(entity_id, "views")

    def like(self, entity_id: int) -> int:
        """
        Add a like to an article.

        Returns:
            The new like count
        """
        entity = self._increment(entity_id, "likes")
        logger.debug(f"Education content {entity_id} liked ({entity.likes})")
        return entity.likes
