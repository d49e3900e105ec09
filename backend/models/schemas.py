"""
Request/response schemas.

Payload keys are camelCase on the wire (``isActive``, ``createdBy``) and
snake_case in Python; every schema accepts either on input.
"""

import re
from datetime import datetime
from typing import Annotated, Any, Generic, List, Literal, Optional, TypeVar

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from helpers.password_validation import validate_password_complexity
from helpers.time_utils import utc_now
from repositories.db_models import (
    AgeGroup,
    AnimalCondition,
    Difficulty,
    EducationCategory,
    FoodCategory,
    ReportPriority,
    ReportStatus,
    RescueAvailability,
    RescueSpecialization,
    UserRole,
)
from repositories.query_builder import ResourceFilter

USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,30}$"
PHONE_PATTERN = r"^[+]?[1-9][\d]{0,15}$"
URL_PATTERN = r"^https?://.+"

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _check_password(value: str) -> str:
    is_valid, errors = validate_password_complexity(value)
    if not is_valid:
        raise ValueError("; ".join(errors))
    return value


StrongPassword = Annotated[str, AfterValidator(_check_password)]


def _normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value.lower() or None


# Envelope


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: str
    timestamp: datetime = Field(default_factory=utc_now)
    data: Optional[T] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PaginatedData(CamelModel, Generic[T]):
    items: List[T]
    pagination: Pagination


class ImageDescriptor(CamelModel):
    filename: str
    original_name: str
    path: str
    size: int
    mimetype: str


# Accounts


class UserRef(CamelModel):
    id: int
    username: str


class User(CamelModel):
    """Outward account representation; the hash and lockout counters are never exposed."""

    id: int
    username: str
    email: str
    role: UserRole
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class RegisterRequest(CamelModel):
    username: str = Field(..., pattern=USERNAME_PATTERN)
    email: EmailStr
    password: StrongPassword
    role: Optional[Literal["user", "admin"]] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginRequest(CamelModel):
    username: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("username", "email", "identifier"),
        description="Username or email",
    )
    password: str = Field(..., min_length=1)


class AuthPayload(CamelModel):
    user: User
    token: str


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: StrongPassword


class AdminUserCreate(RegisterRequest):
    role: Literal["user", "admin"] = "user"
    is_active: bool = True


class AdminUserUpdate(CamelModel):
    username: Optional[str] = Field(None, pattern=USERNAME_PATTERN)
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    password: Optional[StrongPassword] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_email(value)


class ResetPasswordRequest(CamelModel):
    new_password: StrongPassword


class UserFilter(CamelModel):
    search: Optional[str] = None
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    def to_filter(self) -> ResourceFilter:
        equals: dict[str, Any] = {}
        if self.role is not None:
            equals["role"] = self.role
        if self.is_active is not None:
            equals["is_active"] = self.is_active
        return ResourceFilter(equals=equals, search=self.search)


class UserStats(CamelModel):
    total_users: int
    active_users: int
    inactive_users: int
    admin_users: int
    user_users: int


# Shared resource fields


class ResourceOut(CamelModel):
    id: int
    is_active: bool = True
    created_by: Optional[UserRef] = None
    updated_by: Optional[UserRef] = None
    created_at: datetime
    updated_at: datetime


class ActiveFilter(CamelModel):
    search: Optional[str] = None
    is_active: Optional[bool] = None

    def _equals(self) -> dict[str, Any]:
        return {} if self.is_active is None else {"is_active": self.is_active}

    def to_filter(self) -> ResourceFilter:
        return ResourceFilter(equals=self._equals(), search=self.search)


# Vet directory


class VetCreate(CamelModel):
    hospital: str = Field(..., min_length=1, max_length=100)
    address: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, pattern=URL_PATTERN, max_length=500)
    services: List[str] = Field(default_factory=list)
    emergency_service: bool = False
    rating: float = Field(0, ge=0, le=5)
    is_active: bool = True
    image: Optional[ImageDescriptor] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_email(value)


class VetUpdate(CamelModel):
    hospital: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, pattern=URL_PATTERN, max_length=500)
    services: Optional[List[str]] = None
    emergency_service: Optional[bool] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    is_active: Optional[bool] = None


class Vet(ResourceOut):
    hospital: str
    address: str
    phone: str
    email: Optional[str] = None
    website: Optional[str] = None
    services: List[str] = []
    emergency_service: bool
    rating: float
    image: Optional[ImageDescriptor] = None


class VetFilter(ActiveFilter):
    pass


# Rescue teams


class RescueTeamCreate(CamelModel):
    team_name: str = Field(..., min_length=1, max_length=100)
    team_address: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    specialization: List[RescueSpecialization] = Field(default_factory=list)
    team_size: Optional[int] = Field(None, ge=1, le=50)
    availability: RescueAvailability = RescueAvailability.BUSINESS_HOURS
    equipment: List[str] = Field(default_factory=list)
    is_active: bool = True
    image: Optional[ImageDescriptor] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_email(value)


class RescueTeamUpdate(CamelModel):
    team_name: Optional[str] = Field(None, min_length=1, max_length=100)
    team_address: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    specialization: Optional[List[RescueSpecialization]] = None
    team_size: Optional[int] = Field(None, ge=1, le=50)
    availability: Optional[RescueAvailability] = None
    equipment: Optional[List[str]] = None
    is_active: Optional[bool] = None


class RescueTeam(ResourceOut):
    team_name: str
    team_address: str
    phone: str
    email: Optional[str] = None
    specialization: List[RescueSpecialization] = []
    team_size: Optional[int] = None
    availability: RescueAvailability
    equipment: List[str] = []
    image: Optional[ImageDescriptor] = None


class RescueTeamFilter(ActiveFilter):
    specialization: Optional[RescueSpecialization] = None
    availability: Optional[RescueAvailability] = None

    def to_filter(self) -> ResourceFilter:
        equals = self._equals()
        if self.availability is not None:
            equals["availability"] = self.availability
        any_of = {}
        if self.specialization is not None:
            any_of["specialization"] = self.specialization
        return ResourceFilter(equals=equals, any_of=any_of, search=self.search)


# Animal food


class NutritionalInfo(CamelModel):
    protein: Optional[str] = None
    fat: Optional[str] = None
    fiber: Optional[str] = None
    moisture: Optional[str] = None


class AnimalFoodCreate(CamelModel):
    food_name: str = Field(..., min_length=1, max_length=100)
    price: str = Field(..., min_length=1, max_length=50)
    currency: str = Field("USD", max_length=3)
    category: FoodCategory = FoodCategory.DOG_FOOD
    brand: Optional[str] = Field(None, max_length=50)
    weight: Optional[str] = Field(None, max_length=50)
    ingredients: List[str] = Field(default_factory=list)
    nutritional_info: Optional[NutritionalInfo] = None
    age_group: AgeGroup = AgeGroup.ALL_AGES
    in_stock: bool = True
    stock_quantity: int = Field(0, ge=0)
    is_active: bool = True
    image: Optional[ImageDescriptor] = None


class AnimalFoodUpdate(CamelModel):
    food_name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[str] = Field(None, min_length=1, max_length=50)
    currency: Optional[str] = Field(None, max_length=3)
    category: Optional[FoodCategory] = None
    brand: Optional[str] = Field(None, max_length=50)
    weight: Optional[str] = Field(None, max_length=50)
    ingredients: Optional[List[str]] = None
    nutritional_info: Optional[NutritionalInfo] = None
    age_group: Optional[AgeGroup] = None
    in_stock: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class AnimalFood(ResourceOut):
    food_name: str
    price: str
    price_numeric: Optional[float] = None
    currency: str
    category: FoodCategory
    brand: Optional[str] = None
    weight: Optional[str] = None
    ingredients: List[str] = []
    nutritional_info: Optional[NutritionalInfo] = None
    age_group: AgeGroup
    in_stock: bool
    stock_quantity: int
    image: Optional[ImageDescriptor] = None


class AnimalFoodFilter(ActiveFilter):
    category: Optional[FoodCategory] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    in_stock: Optional[bool] = None

    def to_filter(self) -> ResourceFilter:
        equals = self._equals()
        if self.category is not None:
            equals["category"] = self.category
        if self.in_stock is not None:
            equals["in_stock"] = self.in_stock
        ranges = {}
        if self.min_price is not None or self.max_price is not None:
            ranges["price_numeric"] = (self.min_price, self.max_price)
        return ResourceFilter(equals=equals, ranges=ranges, search=self.search)


# Education


class EducationCreate(CamelModel):
    tips: str = Field(..., min_length=1, max_length=1000)
    url: str = Field(..., pattern=URL_PATTERN, max_length=500)
    title: Optional[str] = Field(None, max_length=200)
    category: EducationCategory = EducationCategory.GENERAL
    difficulty: Difficulty = Difficulty.BEGINNER
    tags: List[str] = Field(default_factory=list)
    is_published: bool = True
    is_active: bool = True

    @field_validator("tags")
    @classmethod
    def check_tags(cls, value: List[str]) -> List[str]:
        tags = [tag.strip() for tag in value if tag and tag.strip()]
        for tag in tags:
            if len(tag) > 30:
                raise ValueError("Each tag must be at most 30 characters")
        return tags


class EducationUpdate(CamelModel):
    tips: Optional[str] = Field(None, min_length=1, max_length=1000)
    url: Optional[str] = Field(None, pattern=URL_PATTERN, max_length=500)
    title: Optional[str] = Field(None, max_length=200)
    category: Optional[EducationCategory] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    is_published: Optional[bool] = None
    is_active: Optional[bool] = None


class Education(ResourceOut):
    tips: str
    url: str
    title: Optional[str] = None
    category: EducationCategory
    difficulty: Difficulty
    tags: List[str] = []
    is_published: bool
    views: int
    likes: int


class EducationFilter(ActiveFilter):
    category: Optional[EducationCategory] = None
    difficulty: Optional[Difficulty] = None
    is_published: Optional[bool] = None

    def to_filter(self) -> ResourceFilter:
        equals = self._equals()
        if self.category is not None:
            equals["category"] = self.category
        if self.difficulty is not None:
            equals["difficulty"] = self.difficulty
        if self.is_published is not None:
            equals["is_published"] = self.is_published
        return ResourceFilter(equals=equals, search=self.search)


class LikeResult(CamelModel):
    likes: int


# Reports


class ReportCreate(CamelModel):
    animal_type: str = Field(..., min_length=1, max_length=50)
    animal_condition: AnimalCondition
    location: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=1000)
    contact_name: Optional[str] = Field(None, max_length=100)
    contact_phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    contact_email: Optional[EmailStr] = None
    status: ReportStatus = ReportStatus.PENDING
    priority: ReportPriority = ReportPriority.MEDIUM
    photos: List[ImageDescriptor] = Field(default_factory=list)

    @field_validator("contact_email", mode="before")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_email(value)


class ReportUpdate(CamelModel):
    animal_type: Optional[str] = Field(None, min_length=1, max_length=50)
    animal_condition: Optional[AnimalCondition] = None
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    contact_name: Optional[str] = Field(None, max_length=100)
    contact_phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    contact_email: Optional[EmailStr] = None
    priority: Optional[ReportPriority] = None


class ReportNoteCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=1000)


class ReportNote(CamelModel):
    id: int
    content: str
    added_by: Optional[UserRef] = None
    added_at: datetime


class ReportStatusUpdate(CamelModel):
    status: ReportStatus
    assigned_to: Optional[int] = None


class Report(CamelModel):
    id: int
    animal_type: str
    animal_condition: AnimalCondition
    location: str
    description: str
    photos: List[ImageDescriptor] = []
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    status: ReportStatus
    priority: ReportPriority
    assigned_to: Optional[UserRef] = None
    notes: List[ReportNote] = []
    reported_by: Optional[UserRef] = None
    reported_at: datetime
    created_at: datetime
    updated_at: datetime


class ReportFilter(CamelModel):
    search: Optional[str] = None
    status: Optional[ReportStatus] = None
    priority: Optional[ReportPriority] = None
    animal_condition: Optional[AnimalCondition] = None
    animal_type: Optional[str] = None

    def to_filter(self) -> ResourceFilter:
        equals: dict[str, Any] = {}
        if self.status is not None:
            equals["status"] = self.status
        if self.priority is not None:
            equals["priority"] = self.priority
        if self.animal_condition is not None:
            equals["animal_condition"] = self.animal_condition
        contains = {}
        if self.animal_type:
            contains["animal_type"] = self.animal_type
        return ResourceFilter(equals=equals, contains=contains, search=self.search)


class ReportStats(CamelModel):
    total_reports: int
    pending_reports: int
    in_progress_reports: int
    resolved_reports: int
    critical_reports: int
    high_priority_reports: int


def parse_price(price: str) -> Optional[float]:
    """Leading number of a display price ("$12.99 / bag" -> 12.99), None if there is none."""
    match = re.match(r"\d+(?:\.\d*)?|\.\d+", re.sub(r"[^0-9.]", "", price))
    return float(match.group()) if match else None
