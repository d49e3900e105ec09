"""
Vet directory service.
"""

import models.schemas as schemas
import repositories.db_models as db_models
from services.crud_service import CrudService, ImageResourceMixin


class VetService(ImageResourceMixin, CrudService[db_models.VetDirectory]):
    """Veterinary hospital directory entries with an optional photo."""

    model = db_models.VetDirectory
    create_schema = schemas.VetCreate
    update_schema = schemas.VetUpdate
    resource_name = "Vet entry"
    name_column = "hospital"
    upload_subfolder = "vet"
