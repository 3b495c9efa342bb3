"""Configuration management for ledbar.

Loads and validates YAML-based configuration with Pydantic models.
Environment variables with the ``LEDBAR_`` prefix override the file.
"""

from ledbar.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
