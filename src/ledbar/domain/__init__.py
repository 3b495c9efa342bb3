"""Domain models shared by every ledbar component."""

from ledbar.domain.models import Command, LedConfig

__all__ = ["Command", "LedConfig"]
