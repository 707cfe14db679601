"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, milaan.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SessionConfig(BaseModel):
    """[session] section."""

    model_config = {"frozen": True}

    seed_demo_data: bool = True
    state_dir: str = ".milaan"


class LatencyConfig(BaseModel):
    """[latency] section — simulated round-trip time per read, in milliseconds."""

    model_config = {"frozen": True}

    login: int = Field(default=800, ge=0)
    user_lookup: int = Field(default=500, ge=0)
    problem_list: int = Field(default=800, ge=0)
    problem_detail: int = Field(default=600, ge=0)
    comments: int = Field(default=500, ge=0)
    problem_search: int = Field(default=600, ge=0)
    user_search: int = Field(default=500, ge=0)

    def seconds(self, name: str) -> float:
        """Latency for the read called *name*, in seconds."""
        return getattr(self, name) / 1000

    @classmethod
    def none(cls) -> LatencyConfig:
        """A config with every latency set to zero."""
        return cls(**{name: 0 for name in cls.model_fields})


class NotificationsConfig(BaseModel):
    """[notifications] section."""

    model_config = {"frozen": True}

    enabled: bool = True


