"""
Application configuration using Pydantic settings.

Configuration comes from environment variables with sensible defaults.
"""

from .settings import DeliveryMode, Settings, get_settings

__all__ = ["DeliveryMode", "Settings", "get_settings"]
