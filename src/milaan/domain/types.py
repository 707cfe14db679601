"""Classification enums for users, problems, and notifications."""

from __future__ import annotations

from enum import StrEnum


class UserRole(StrEnum):
    """Who a user is on the platform."""

    HELPER = "helper"
    ASKER = "asker"


class Category(StrEnum):
    """Fixed set of problem categories."""

    EDUCATION = "education"
    LEGAL = "legal"
    HOUSING = "housing"
    HEALTH = "health"
    DISASTER = "disaster"
    BUSINESS = "business"
    COMMUNITY = "community"
    SAFETY = "safety"
    ESSENTIAL = "essential"
    OTHER = "other"


CATEGORY_LABELS: dict[str, str] = {
    "education": "Education & Teaching",
    "legal": "Legal Assistance",
    "housing": "Housing & Shelter",
    "health": "Healthcare & Medical",
    "disaster": "Disaster Relief",
    "business": "Business & Employment",
    "community": "Community Development",
    "safety": "Safety & Protection",
    "essential": "Essential Supplies",
    "other": "Other",
}


class NotificationType(StrEnum):
    """What happened to trigger a notification."""

    COMMENT = "comment"
    SOLUTION = "solution"
    HELPER = "helper"
    UPVOTE = "upvote"


class ProblemSort(StrEnum):
    """Orderings offered by problem listings."""

    RECENT = "recent"
    POPULAR = "popular"
    COMMENTS = "comments"
