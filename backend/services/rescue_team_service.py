"""
Rescue team service.
"""

import models.schemas as schemas
import repositories.db_models as db_models
from services.crud_service import CrudService, ImageResourceMixin


class RescueTeamService(ImageResourceMixin, CrudService[db_models.RescueTeam]):
    model = db_models.RescueTeam
    create_schema = schemas.RescueTeamCreate
    update_schema = schemas.RescueTeamUpdate
    resource_name = "Rescue team"
    name_column = "team_name"
    upload_subfolder = "rescue-team"
