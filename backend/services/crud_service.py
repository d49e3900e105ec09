"""
Generic resource service.

``CrudService`` implements list/get/create/update/delete/search once for any
model that exposes an integer ``id``, ``created_at``/``updated_at`` and
(optionally) creator/updater columns. Entity services subclass it, set the
class attributes, and override ``prepare`` for derived fields.

Writes always validate the full document: ``update`` merges the patch onto
the entity's current state and re-validates the result against the create
schema, so a patch can never leave an entity in a state ``create`` would
have refused.
"""

import re
from dataclasses import replace
from typing import Any, Generic, List, Mapping, Optional, Tuple, TypeVar

import pydantic
from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from helpers.pagination import PageParams, build_order_by, pagination_meta
from models.config import settings
from models.exceptions import (
    ConflictException,
    NotFoundException,
    UpstreamFailureException,
    ValidationException,
)
from repositories.base import BaseRepository
from repositories.database import Base
from repositories.query_builder import ResourceFilter
from services.file_store import FileStore, IncomingFile, get_file_store

ModelT = TypeVar("ModelT", bound=Base)  # type: ignore[type-arg]

_UNIQUE_FIELD_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),  # SQLite
    re.compile(r"Key \((\w+)\)="),  # PostgreSQL
)


def validation_errors(exc: pydantic.ValidationError) -> List[dict[str, str]]:
    """Flatten pydantic errors into ``[{"field": ..., "message": ...}]``."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        errors.append({"field": field, "message": error["msg"]})
    return errors


def conflict_field(exc: IntegrityError) -> Optional[str]:
    """Name of the column a unique index rejected, when the driver says."""
    message = str(exc.orig)
    for pattern in _UNIQUE_FIELD_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


class CrudService(Generic[ModelT]):
    """
    CRUD over one SQLAlchemy model.

    Class attributes:
        model: SQLAlchemy model class.
        create_schema: Schema a complete document must satisfy.
        update_schema: Schema a patch must satisfy (all fields optional).
        resource_name: Used in messages ("Vet entry not found").
        default_sort: Column for the default newest-first ordering.
        name_column: Column the ``name`` sort key maps to.
        creator_field / updater_field: Columns stamped with the actor id;
            None disables stamping.
        soft_delete: Flag rows inactive instead of deleting them; reads
            then only ever see active rows.
    """

    model: type[ModelT]
    create_schema: type[pydantic.BaseModel]
    update_schema: type[pydantic.BaseModel]
    resource_name: str = "Resource"
    default_sort: str = "created_at"
    name_column: Optional[str] = None
    creator_field: Optional[str] = "created_by_id"
    updater_field: Optional[str] = "updated_by_id"
    soft_delete: bool = False

    def __init__(self, db: Session, file_store: Optional[FileStore] = None):
        self.db = db
        self.file_store = file_store or get_file_store()
        base_clauses = [self.model.is_active == True] if self.soft_delete else []  # noqa: E712
        self.repo = BaseRepository(self.model, db, base_clauses)

    # Reads

    def list(
        self,
        filters: Optional[ResourceFilter] = None,
        params: PageParams = PageParams(),
    ) -> Tuple[List[ModelT], dict[str, int]]:
        """
        Get one page of entities.

        Returns:
            Tuple of (items, pagination block)
        """
        order_by = build_order_by(
            self.model, params, default_column=self.default_sort, name_column=self.name_column
        )
        items = self.repo.find(filters, order_by=order_by, skip=params.skip, limit=params.limit)
        total = self.repo.count(filters)
        return items, pagination_meta(params.page, params.limit, total)

    def search(
        self,
        term: str,
        params: PageParams = PageParams(),
        filters: Optional[ResourceFilter] = None,
    ) -> Tuple[List[ModelT], dict[str, int]]:
        """Same as ``list`` restricted to entities whose search fields match any word of ``term``."""
        return self.list(replace(filters or ResourceFilter(), search=term), params)

    def get_or_404(self, entity_id: int) -> ModelT:
        entity = self.repo.get_by_id(entity_id)
        if entity is None:
            raise NotFoundException(f"{self.resource_name} not found")
        return entity

    def get_by_id(self, entity_id: int) -> ModelT:
        return self.get_or_404(entity_id)

    # Writes

    def validate(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate a complete document against the create schema.

        Raises:
            ValidationException: With one entry per offending field.
        """
        try:
            document = self.create_schema.model_validate(dict(data))
        except pydantic.ValidationError as exc:
            raise ValidationException("Validation failed", errors=validation_errors(exc))
        return document.model_dump()

    def validate_patch(self, patch: Mapping[str, Any]) -> dict[str, Any]:
        try:
            parsed = self.update_schema.model_validate(dict(patch))
        except pydantic.ValidationError as exc:
            raise ValidationException("Validation failed", errors=validation_errors(exc))
        return parsed.model_dump(exclude_unset=True)

    def snapshot(self, entity: ModelT) -> dict[str, Any]:
        """Current values of every create-schema field, as stored."""
        return {
            name: getattr(entity, name)
            for name in self.create_schema.model_fields
            if hasattr(entity, name)
        }

    def merge(
        self,
        entity: ModelT,
        patch: Mapping[str, Any],
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Apply a patch to the current state and re-validate the whole document.

        ``overrides`` are server-side values (stored image descriptors) that
        skip the patch schema but still go through the create schema.
        """
        changes = self.validate_patch(patch)
        merged = {**self.snapshot(entity), **changes, **(overrides or {})}
        return self.validate(merged)

    def prepare(
        self, values: dict[str, Any], entity: Optional[ModelT] = None
    ) -> dict[str, Any]:
        """Pre-write transformation hook; ``entity`` is None on create."""
        return values

    def _commit(self, entity: ModelT) -> ModelT:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            field = conflict_field(exc)
            logger.info(f"{self.resource_name} write rejected by unique index on {field}")
            message = f"{field} already exists" if field else "Duplicate value"
            raise ConflictException(message, field=field) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"{self.resource_name} write failed: {exc}")
            raise UpstreamFailureException("Database operation failed") from exc
        self.db.refresh(entity)
        return entity

    def create(self, data: Mapping[str, Any], actor_id: Optional[int] = None) -> ModelT:
        return self.insert(self.validate(data), actor_id)

    def insert(self, values: dict[str, Any], actor_id: Optional[int] = None) -> ModelT:
        """Persist an already validated document."""
        values = self.prepare(values)
        entity = self.model(**values)
        if self.creator_field:
            setattr(entity, self.creator_field, actor_id)
        self.repo.add(entity)
        entity = self._commit(entity)
        logger.info(f"{self.resource_name} {entity.id} created by {actor_id}")
        return entity

    def update(
        self,
        entity_id: int,
        patch: Mapping[str, Any],
        actor_id: Optional[int] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> ModelT:
        entity = self.get_or_404(entity_id)
        values = self.prepare(self.merge(entity, patch, overrides), entity)
        for name, value in values.items():
            setattr(entity, name, value)
        if self.updater_field:
            setattr(entity, self.updater_field, actor_id)
        entity = self._commit(entity)
        logger.info(f"{self.resource_name} {entity.id} updated by {actor_id}")
        return entity

    def delete(self, entity_id: int) -> None:
        entity = self.get_or_404(entity_id)
        if self.soft_delete:
            entity.is_active = False
            self._commit(entity)
        else:
            self.db.delete(entity)
            try:
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.error(f"{self.resource_name} delete failed: {exc}")
                raise UpstreamFailureException("Database operation failed") from exc
        logger.info(f"{self.resource_name} {entity_id} deleted")


class ImageResourceMixin:
    """
    Single-image handling for a ``CrudService``.

    A newly stored file is removed again if the write fails for any reason;
    a replaced file is removed only once the new row is committed.
    """

    upload_subfolder: str = "misc"
    image_field: str = "image"

    def store_image(self, image: IncomingFile) -> dict[str, Any]:
        return self.file_store.save(  # type: ignore[attr-defined]
            self.upload_subfolder, image, settings.MAX_IMAGE_SIZE
        )

    def _image_path(self, entity: Any) -> Optional[str]:
        descriptor = getattr(entity, self.image_field, None) or {}
        return descriptor.get("path")

    def create(  # type: ignore[override]
        self,
        data: Mapping[str, Any],
        actor_id: Optional[int] = None,
        image: Optional[IncomingFile] = None,
    ):
        if image is None:
            return super().create(data, actor_id)  # type: ignore[misc]

        stored = self.store_image(image)
        try:
            return super().create({**data, self.image_field: stored}, actor_id)  # type: ignore[misc]
        except Exception:
            self.file_store.delete(stored["path"])  # type: ignore[attr-defined]
            raise

    def update(  # type: ignore[override]
        self,
        entity_id: int,
        patch: Mapping[str, Any],
        actor_id: Optional[int] = None,
        image: Optional[IncomingFile] = None,
    ):
        if image is None:
            return super().update(entity_id, patch, actor_id)  # type: ignore[misc]

        old_path = self._image_path(self.get_or_404(entity_id))  # type: ignore[attr-defined]
        stored = self.store_image(image)
        try:
            entity = super().update(  # type: ignore[misc]
                entity_id, patch, actor_id, overrides={self.image_field: stored}
            )
        except Exception:
            self.file_store.delete(stored["path"])  # type: ignore[attr-defined]
            raise
        if old_path and old_path != stored["path"]:
            self.file_store.delete(old_path)  # type: ignore[attr-defined]
        return entity

    def delete(self, entity_id: int) -> None:
        path = self._image_path(self.get_or_404(entity_id))  # type: ignore[attr-defined]
        super().delete(entity_id)  # type: ignore[misc]
        if path:
            self.file_store.delete(path)  # type: ignore[attr-defined]
