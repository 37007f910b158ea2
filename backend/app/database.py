"""
Database session dependency for the HTTP boundary.

Database initialization is handled explicitly in main.py startup, not at
import time.
"""

from ingestion.db import db, get_db

__all__ = ["db", "get_db"]
