"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Accounts plus the five resource tables (vet directory, rescue teams, animal
food, education, incident reports). The four catalog/directory tables share
``TimestampMixin`` and ``OwnedResourceMixin`` which give them the capabilities
the generic CRUD service relies on: an integer id, created/updated
timestamps, and creator/updater references to an account.
"""

import enum
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from helpers.time_utils import ensure_utc, utc_now
from repositories.database import Base


def _enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Enum column type that persists member values ("In Progress"), not names."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    PREMIUM_USER = "premiumuser"
    RESCUE_TEAM = "rescueteam"


class RescueSpecialization(str, enum.Enum):
    WILDLIFE = "Wildlife"
    DOMESTIC_ANIMALS = "Domestic Animals"
    MARINE_LIFE = "Marine Life"
    BIRDS = "Birds"
    EMERGENCY_RESPONSE = "Emergency Response"


class RescueAvailability(str, enum.Enum):
    ALWAYS = "24/7"
    BUSINESS_HOURS = "Business Hours"
    EMERGENCY_ONLY = "Emergency Only"


class FoodCategory(str, enum.Enum):
    DOG_FOOD = "Dog Food"
    CAT_FOOD = "Cat Food"
    BIRD_FOOD = "Bird Food"
    FISH_FOOD = "Fish Food"
    SMALL_ANIMAL_FOOD = "Small Animal Food"
    TREATS = "Treats"
    SUPPLEMENTS = "Supplements"


class AgeGroup(str, enum.Enum):
    PUPPY_KITTEN = "Puppy/Kitten"
    ADULT = "Adult"
    SENIOR = "Senior"
    ALL_AGES = "All Ages"


class EducationCategory(str, enum.Enum):
    PET_CARE = "Pet Care"
    TRAINING = "Training"
    HEALTH = "Health"
    NUTRITION = "Nutrition"
    BEHAVIOR = "Behavior"
    EMERGENCY_CARE = "Emergency Care"
    GENERAL = "General"


class Difficulty(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class AnimalCondition(str, enum.Enum):
    CRITICAL = "Critical"
    INJURED = "Injured"
    SICK = "Sick"
    HEALTHY = "Healthy"
    UNKNOWN = "Unknown"


class ReportStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class ReportPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )


class OwnedResourceMixin(TimestampMixin):
    """Columns shared by the catalog/directory resources."""

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    @declared_attr
    def created_by_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
        )

    @declared_attr
    def updated_by_id(cls) -> Mapped[Optional[int]]:
        return mapped_column(
            Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
        )

    @declared_attr
    def created_by(cls) -> Mapped[Optional["User"]]:
        return relationship("User", foreign_keys=[cls.created_by_id], lazy="joined")

    @declared_attr
    def updated_by(cls) -> Mapped[Optional["User"]]:
        return relationship("User", foreign_keys=[cls.updated_by_id], lazy="joined")


class User(TimestampMixin, Base):
    __tablename__ = "users"
    __search_fields__ = ("username", "email")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(
        String(30), unique=True, index=True, nullable=False
    )
    email: Mapped[str] = mapped_column(
        String(254), unique=True, index=True, nullable=False
    )
    # Deferred: only the credential lookup loads the hash
    hashed_password: Mapped[str] = mapped_column(
        String(128), nullable=False, deferred=True
    )
    role: Mapped[UserRole] = mapped_column(
        _enum_column(UserRole, "user_role"), default=UserRole.ADMIN, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    login_attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lock_until: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_locked(self) -> bool:
        """True while ``lock_until`` is in the future; evaluated on every access."""
        lock_until = ensure_utc(self.lock_until)
        return lock_until is not None and lock_until > utc_now()

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role}>"


class VetDirectory(OwnedResourceMixin, Base):
    __tablename__ = "vet_directory"
    __search_fields__ = ("hospital", "address")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    hospital: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(254), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    services: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    emergency_service: Mapped[bool] = mapped_column(Boolean, default=False)
    rating: Mapped[float] = mapped_column(Float, default=0)
    image: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)


class RescueTeam(OwnedResourceMixin, Base):
    __tablename__ = "rescue_teams"
    __search_fields__ = ("team_name", "team_address")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    team_name: Mapped[str] = mapped_column(String(100), nullable=False)
    team_address: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(254), nullable=True)
    specialization: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    team_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    availability: Mapped[RescueAvailability] = mapped_column(
        _enum_column(RescueAvailability, "rescue_availability"),
        default=RescueAvailability.BUSINESS_HOURS,
        nullable=False,
    )
    equipment: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    image: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)


class AnimalFood(OwnedResourceMixin, Base):
    __tablename__ = "animal_food"
    __search_fields__ = ("food_name", "brand")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    food_name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[str] = mapped_column(String(50), nullable=False)
    price_numeric: Mapped[Optional[float]] = mapped_column(
        Float, nullable=True, index=True
    )
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    category: Mapped[FoodCategory] = mapped_column(
        _enum_column(FoodCategory, "food_category"),
        default=FoodCategory.DOG_FOOD,
        nullable=False,
        index=True,
    )
    brand: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    weight: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    ingredients: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    nutritional_info: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSON, nullable=True
    )
    age_group: Mapped[AgeGroup] = mapped_column(
        _enum_column(AgeGroup, "age_group"), default=AgeGroup.ALL_AGES, nullable=False
    )
    in_stock: Mapped[bool] = mapped_column(Boolean, default=True)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0)
    image: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)


class Education(OwnedResourceMixin, Base):
    __tablename__ = "education"
    __search_fields__ = ("tips", "title")
    __table_args__ = (Index("ix_education_published_active", "is_published", "is_active"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    tips: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    category: Mapped[EducationCategory] = mapped_column(
        _enum_column(EducationCategory, "education_category"),
        default=EducationCategory.GENERAL,
        nullable=False,
        index=True,
    )
    difficulty: Mapped[Difficulty] = mapped_column(
        _enum_column(Difficulty, "difficulty"),
        default=Difficulty.BEGINNER,
        nullable=False,
    )
    tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, default=True)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class Report(TimestampMixin, Base):
    __tablename__ = "reports"
    __search_fields__ = ("animal_type", "location", "description")

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    animal_type: Mapped[str] = mapped_column(String(50), nullable=False)
    animal_condition: Mapped[AnimalCondition] = mapped_column(
        _enum_column(AnimalCondition, "animal_condition"), nullable=False, index=True
    )
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    photos: Mapped[List[dict[str, Any]]] = mapped_column(
        JSON, default=list, nullable=False
    )
    contact_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(254), nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        _enum_column(ReportStatus, "report_status"),
        default=ReportStatus.PENDING,
        nullable=False,
        index=True,
    )
    priority: Mapped[ReportPriority] = mapped_column(
        _enum_column(ReportPriority, "report_priority"),
        default=ReportPriority.MEDIUM,
        nullable=False,
        index=True,
    )
    # Soft delete flag: deleted reports stay in the table with is_active = False
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    reported_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False, index=True
    )
    reported_by_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    assigned_to_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    reported_by: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[reported_by_id], lazy="joined"
    )
    assigned_to: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[assigned_to_id], lazy="joined"
    )
    notes: Mapped[List["ReportNote"]] = relationship(
        "ReportNote",
        back_populates="report",
        order_by="[ReportNote.added_at, ReportNote.id]",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ReportNote(Base):
    """Free-text note on a report. Append-only: notes are never edited."""

    __tablename__ = "report_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    report_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    added_by_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    report: Mapped["Report"] = relationship("Report", back_populates="notes")
    added_by: Mapped[Optional["User"]] = relationship("User", lazy="joined")
