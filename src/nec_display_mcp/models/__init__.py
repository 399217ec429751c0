"""Data models for display settings."""

from .settings import DisplaySettings, PowerState
