"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .animal_food_service import AnimalFoodService
from .auth_service import AuthService
from .crud_service import CrudService
from .education_service import EducationService
from .report_service import ReportService
from .rescue_team_service import RescueTeamService
from .user_service import UserService
from .vet_service import VetService

__all__ = [
    "AnimalFoodService",
    "AuthService",
    "CrudService",
    "EducationService",
    "ReportService",
    "RescueTeamService",
    "UserService",
    "VetService",
]
