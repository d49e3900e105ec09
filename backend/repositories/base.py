"""
Base repository class providing common database operations.
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from repositories.database import Base
from repositories.query_builder import FilterBuilder, ResourceFilter

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Type parameter T should be a SQLAlchemy model class. ``base_clauses``
    are applied to every read (soft-deleted reports are hidden that way).
    """

    def __init__(
        self,
        model: type[T],
        db: Session,
        base_clauses: Sequence[ColumnElement[bool]] = (),
    ):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
            base_clauses: Clauses every read is restricted to
        """
        self.model = model
        self.db = db
        self.base_clauses = list(base_clauses)
        self.filter_builder = FilterBuilder(model)

    def _query(self):
        return self.db.query(self.model).filter(*self.base_clauses)

    def get_by_id(self, id: int) -> T | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity if found, None otherwise
        """
        return self._query().filter(self.model.id == id).first()

    def clauses_for(self, resource_filter: ResourceFilter | None) -> list[Any]:
        if resource_filter is None:
            return []
        return self.filter_builder.build(resource_filter)

    def find(
        self,
        resource_filter: ResourceFilter | None = None,
        order_by: Sequence[Any] = (),
        skip: int = 0,
        limit: int = 100,
    ) -> list[T]:
        """
        Get entities matching a filter, sorted and paginated.

        Args:
            resource_filter: Filter to apply, None for everything
            order_by: ORDER BY expressions
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of entities
        """
        query = self._query().filter(*self.clauses_for(resource_filter))
        return query.order_by(*order_by).offset(skip).limit(limit).all()

    def count(self, resource_filter: ResourceFilter | None = None) -> int:
        """
        Count entities matching a filter.

        Returns:
            Total count
        """
        return self._query().filter(*self.clauses_for(resource_filter)).count()

    def add(self, entity: T) -> None:
        """
        Add entity to session without committing.

        Args:
            entity: Entity to add
        """
        self.db.add(entity)

    def commit(self) -> None:
        """Commit the current transaction."""
        self.db.commit()

    def refresh(self, entity: T) -> None:
        """
        Refresh entity from database.

        Args:
            entity: Entity to refresh
        """
        self.db.refresh(entity)
