"""
Application configuration using Pydantic settings.

Re-exports the unified ingestion.config module so backend code can import
settings relative to the app package.
"""

from ingestion.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
