"""
Animal food catalog service.
"""

from typing import Any, Optional

import models.schemas as schemas
import repositories.db_models as db_models
from services.crud_service import CrudService, ImageResourceMixin


class AnimalFoodService(ImageResourceMixin, CrudService[db_models.AnimalFood]):
    """Catalog entries; ``price`` is free text, ``price_numeric`` backs range filters."""

    model = db_models.AnimalFood
    create_schema = schemas.AnimalFoodCreate
    update_schema = schemas.AnimalFoodUpdate
    resource_name = "Animal food"
    name_column = "food_name"
    upload_subfolder = "animal-food"

    def prepare(
        self, values: dict[str, Any], entity: Optional[db_models.AnimalFood] = None
    ) -> dict[str, Any]:
        # An unparseable price keeps whatever numeric price was there before
        price_numeric = schemas.parse_price(values["price"])
        if price_numeric is not None:
            values["price_numeric"] = price_numeric
        return values
