"""Entity models — users, problems, comments, notifications.

All entities are frozen. State changes produce a new instance (via
``model_validate`` on merged data, or ``model_copy(update=...)`` for
fields the domain manager owns) which replaces the stored one.

Validation lives next to the models:

- ``ProblemDraft.validate_create()``: checks a new problem's fields.
- ``Problem.validate_update()``: checks a patch against editable fields.
- ``User.validate_create()`` / ``User.validate_update()``: same for users.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from pydantic import BaseModel, Field, ValidationError

from milaan.domain.lifecycle import ProblemStatus
from milaan.domain.types import Category, NotificationType, UserRole

# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationResult:
    """Result of a model validation check."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}" if loc else str(err["msg"])


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


class Location(BaseModel):
    """A point on the map with a human-readable address."""

    model_config = {"frozen": True}

    lat: float = 0.0
    lng: float = 0.0
    address: str = ""


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


class User(BaseModel):
    """A registered person, either asking for or offering help."""

    model_config = {"frozen": True}

    id: str
    name: str
    email: str
    avatar: str = ""
    role: UserRole
    bio: str = ""
    location: Location = Field(default_factory=Location)
    created_at: str
    help_count: int | None = None
    problem_count: int | None = None
    rating: float | None = Field(default=None, ge=0.0, le=5.0)

    REQUIRED_ON_CREATE: ClassVar[tuple[str, ...]] = ("name", "email", "role")
    IMMUTABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"id", "created_at", "role"})

    @property
    def is_helper(self) -> bool:
        return self.role == UserRole.HELPER

    @classmethod
    def validate_create(cls, profile: dict[str, Any]) -> ValidationResult:
        """Check a registration profile before a user is created."""
        errors: list[str] = []
        for key in cls.REQUIRED_ON_CREATE:
            value = profile.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors.append(f"Missing required field: {key}")
        role = profile.get("role")
        if role is not None and (
            not isinstance(role, str) or role not in UserRole.__members__.values()
        ):
            errors.append(f"Invalid role: {role!r}")
        unknown = sorted(set(profile) - set(cls.model_fields))
        if unknown:
            errors.append(f"Unknown fields: {', '.join(unknown)}")
        return ValidationResult(valid=not errors, errors=errors)

    @classmethod
    def validate_update(cls, changes: dict[str, Any]) -> ValidationResult:
        """Check a self-edit patch. Immutable fields only produce warnings."""
        errors: list[str] = []
        warnings: list[str] = []
        for key in changes:
            if key in cls.IMMUTABLE_FIELDS:
                warnings.append(f"Cannot change immutable field: {key}")
            elif key not in cls.model_fields:
                errors.append(f"Unknown field: {key}")
        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


# ---------------------------------------------------------------------------
# Problem
# ---------------------------------------------------------------------------


class ProblemDraft(BaseModel):
    """Caller-supplied fields for a new problem."""

    model_config = {"frozen": True, "extra": "forbid"}

    title: str
    description: str
    category: Category
    location: Location = Field(default_factory=Location)
    images: list[str] = Field(default_factory=list)
    is_urgent: bool = False

    @classmethod
    def validate_create(cls, data: dict[str, Any]) -> tuple[ProblemDraft | None, ValidationResult]:
        """Parse *data* into a draft, returning the draft and validation outcome."""
        errors: list[str] = []
        for key in ("title", "description"):
            value = data.get(key)
            if not isinstance(value, str) or not value.strip():
                errors.append(f"Missing required field: {key}")
        if errors:
            return None, ValidationResult(valid=False, errors=errors)
        try:
            draft = cls.model_validate(data)
        except ValidationError as exc:
            return None, ValidationResult(valid=False, errors=[_first_error(exc)])
        return draft, ValidationResult(valid=True)


class Problem(BaseModel):
    """A request for help posted by a user."""

    model_config = {"frozen": True}

    id: str
    title: str
    description: str
    category: Category
    status: ProblemStatus = ProblemStatus.OPEN
    location: Location = Field(default_factory=Location)
    images: list[str] = Field(default_factory=list)
    user_id: str
    created_at: str
    updated_at: str
    helper_ids: list[str] = Field(default_factory=list)
    upvotes: int = 0
    comment_count: int = 0
    is_urgent: bool = False

    # Owned by the domain manager; never merged from a caller's patch.
    MANAGED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "id",
            "user_id",
            "created_at",
            "updated_at",
            "status",
            "helper_ids",
            "upvotes",
            "comment_count",
        }
    )

    @classmethod
    def validate_update(cls, changes: dict[str, Any]) -> ValidationResult:
        """Check a patch against the editable problem fields."""
        errors: list[str] = []
        warnings: list[str] = []
        for key, value in changes.items():
            if key in cls.MANAGED_FIELDS:
                warnings.append(f"Cannot change managed field: {key}")
                continue
            if key not in cls.model_fields:
                errors.append(f"Unknown field: {key}")
                continue
            if key in ("title", "description") and (
                not isinstance(value, str) or not value.strip()
            ):
                errors.append(f"Field cannot be blank: {key}")
            elif key == "category" and (
                not isinstance(value, str) or value not in Category.__members__.values()
            ):
                errors.append(f"Invalid category: {value!r}")
        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

    def has_helper(self, user_id: str) -> bool:
        return user_id in self.helper_ids


# ---------------------------------------------------------------------------
# Comment
# ---------------------------------------------------------------------------


class Comment(BaseModel):
    """A reply posted under a problem."""

    model_config = {"frozen": True}

    id: str
    content: str
    problem_id: str
    user_id: str
    created_at: str
    parent_id: str | None = None
    is_solution: bool = False


# ---------------------------------------------------------------------------
# Notification
# ---------------------------------------------------------------------------


class Notification(BaseModel):
    """Something a user should know about one of their problems or comments."""

    model_config = {"frozen": True}

    id: str
    type: NotificationType
    content: str
    read: bool = False
    user_id: str
    related_id: str
    created_at: str
