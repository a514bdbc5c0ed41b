"""
Project storage backends and the process-wide store.
"""
import logging
from typing import Optional

from .base import ProjectStore, ProjectNotFoundError
from .memory_store import InMemoryProjectStore
from .sql_store import SqlProjectStore
from ..config import settings

logger = logging.getLogger(__name__)

# Singleton store instance
_store_instance: Optional[ProjectStore] = None


def get_project_store() -> ProjectStore:
    """
    Get or create the project store.

    Backend is selected by the STORE_BACKEND setting.
    """
    global _store_instance

    if _store_instance is None:
        if settings.store_backend == "memory":
            logger.info("Using in-memory project store")
            _store_instance = InMemoryProjectStore()
        else:
            logger.info("Using SQL project store")
            _store_instance = SqlProjectStore()

    return _store_instance


__all__ = [
    "ProjectStore",
    "ProjectNotFoundError",
    "InMemoryProjectStore",
    "SqlProjectStore",
    "get_project_store",
]
