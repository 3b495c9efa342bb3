"""Core domain models for the ledbar system.

A ``LedConfig`` is the full state snapshot published by the remote
controller. A ``Command`` is one of the fixed user actions relayed from
the status bar. Everything else the controller sends is carried along
untouched as extra fields.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class Command(str, enum.Enum):
    """User action tokens accepted on the local control endpoint."""

    PALETTE_UP = "palette_up"
    PALETTE_DOWN = "palette_down"
    BRIGHTNESS_UP = "brightness_up"
    BRIGHTNESS_DOWN = "brightness_down"
    POWER = "power"

    @classmethod
    def tokens(cls) -> list[str]:
        return [command.value for command in cls]


# ---------------------------------------------------------------------------
# Controller state snapshot
# ---------------------------------------------------------------------------


class GroupSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    palette: int | None = Field(default=None, description="Active palette id")


class Groups(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    main: GroupSettings = Field(default_factory=GroupSettings)


class LedConfig(BaseModel):
    """Full state snapshot of the remote controller.

    Immutable; a newly received snapshot replaces the held one. Fields
    this system does not interpret are preserved as extras so a snapshot
    can be patched and compared without losing data.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    on: bool = Field(default=True, description="Whether the lights are powered")
    global_brightness: float = Field(default=0.0, ge=0.0, le=1.0)
    groups: Groups = Field(default_factory=Groups)

    @property
    def palette(self) -> int | None:
        return self.groups.main.palette

    def merged(self, patch: dict[str, Any]) -> LedConfig:
        """Return a new snapshot with a partial-config patch applied.

        Nested objects are merged key by key; scalars in the patch
        replace the snapshot's values.
        """
        return LedConfig.model_validate(_deep_merge(self.model_dump(), patch))


def _deep_merge(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
