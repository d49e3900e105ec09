"""
Incident report service.

Reports differ from the catalog resources in three ways: anyone may file
one, photos accumulate across updates instead of being replaced, and
deletion only hides the report.
"""

from typing import Any, Mapping, Optional, Sequence

import pydantic
from loguru import logger
from sqlalchemy import func

import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.exceptions import NotFoundException, ValidationException
from repositories.user_repository import UserRepository
from services.crud_service import CrudService, validation_errors
from services.file_store import IncomingFile


class ReportService(CrudService[db_models.Report]):
    model = db_models.Report
    create_schema = schemas.ReportCreate
    update_schema = schemas.ReportUpdate
    resource_name = "Report"
    default_sort = "reported_at"
    name_column = "animal_type"
    creator_field = "reported_by_id"
    updater_field = None
    soft_delete = True
    upload_subfolder = "reports"

    def store_photos(self, photos: Sequence[IncomingFile]) -> list[dict[str, Any]]:
        """
        Store every photo or none of them.

        Raises:
            ValidationException: Too many files, or one of them is rejected.
        """
        if len(photos) > settings.MAX_REPORT_PHOTOS:
            raise ValidationException(
                f"At most {settings.MAX_REPORT_PHOTOS} photos are allowed",
                errors=[
                    {
                        "field": "photos",
                        "message": f"At most {settings.MAX_REPORT_PHOTOS} photos are allowed",
                    }
                ],
            )

        stored: list[dict[str, Any]] = []
        try:
            for photo in photos:
                stored.append(
                    self.file_store.save(
                        self.upload_subfolder, photo, settings.MAX_REPORT_PHOTO_SIZE
                    )
                )
        except Exception:
            self.discard_photos(stored)
            raise
        return stored

    def discard_photos(self, stored: Sequence[Mapping[str, Any]]) -> None:
        for descriptor in stored:
            self.file_store.delete(descriptor.get("path"))

    def create(  # type: ignore[override]
        self,
        data: Mapping[str, Any],
        actor_id: Optional[int] = None,
        photos: Sequence[IncomingFile] = (),
    ) -> db_models.Report:
        stored = self.store_photos(photos)
        try:
            return super().create({**data, "photos": stored}, actor_id)
        except Exception:
            self.discard_photos(stored)
            raise

    def update(  # type: ignore[override]
        self,
        entity_id: int,
        patch: Mapping[str, Any],
        actor_id: Optional[int] = None,
        photos: Sequence[IncomingFile] = (),
    ) -> db_models.Report:
        if not photos:
            return super().update(entity_id, patch, actor_id)

        report = self.get_or_404(entity_id)
        stored = self.store_photos(photos)
        try:
            return super().update(
                entity_id,
                patch,
                actor_id,
                overrides={"photos": list(report.photos or []) + stored},
            )
        except Exception:
            self.discard_photos(stored)
            raise

    def add_note(
        self, entity_id: int, content: str, actor_id: Optional[int]
    ) -> db_models.Report:
        """Append a note; notes are never edited or removed."""
        try:
            note = schemas.ReportNoteCreate.model_validate({"content": content})
        except pydantic.ValidationError as exc:
            raise ValidationException("Validation failed", errors=validation_errors(exc))

        report = self.get_or_404(entity_id)
        report.notes.append(
            db_models.ReportNote(content=note.content, added_by_id=actor_id)
        )
        report = self._commit(report)
        logger.info(f"Note added to report {entity_id} by {actor_id}")
        return report

    def update_status(
        self,
        entity_id: int,
        status: db_models.ReportStatus,
        assigned_to: Optional[int] = None,
    ) -> db_models.Report:
        report = self.get_or_404(entity_id)
        if assigned_to is not None and UserRepository(self.db).get_by_id(assigned_to) is None:
            raise NotFoundException("Assigned user not found")

        report.status = status
        if assigned_to is not None:
            report.assigned_to_id = assigned_to
        report = self._commit(report)
        logger.info(f"Report {entity_id} moved to {status.value}")
        return report

    def stats(self) -> schemas.ReportStats:
        def count(*clauses) -> int:
            return (
                self.db.query(func.count(db_models.Report.id))
                .filter(db_models.Report.is_active == True, *clauses)  # noqa: E712
                .scalar()
                or 0
            )

        return schemas.ReportStats(
            total_reports=count(),
            pending_reports=count(db_models.Report.status == db_models.ReportStatus.PENDING),
            in_progress_reports=count(
                db_models.Report.status == db_models.ReportStatus.IN_PROGRESS
            ),
            resolved_reports=count(db_models.Report.status == db_models.ReportStatus.RESOLVED),
            critical_reports=count(
                db_models.Report.animal_condition == db_models.AnimalCondition.CRITICAL
            ),
            high_priority_reports=count(
                db_models.Report.priority == db_models.ReportPriority.HIGH
            ),
        )
