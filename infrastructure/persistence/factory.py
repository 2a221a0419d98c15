"""
Persistence Factory
===================

Factory pattern for creating persistence backends based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .django_adapter import DjangoDocumentPersistence
from .interface import PersistenceInterface
from .memory_adapter import InMemoryPersistence

logger = logging.getLogger(__name__)

PersistenceBackend = Literal["django", "memory"]


class PersistenceFactory:
    """
    Factory for creating persistence backends.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"PERSISTENCE_BACKEND": "django"}  # or 'memory'

        # In your code
        persistence = PersistenceFactory.create()
    """

    @staticmethod
    def create(backend: PersistenceBackend | None = None) -> PersistenceInterface:
        """
        Create a persistence backend.

        Args:
            backend: 'django' or 'memory'. If None, reads
                     settings.INFRASTRUCTURE["PERSISTENCE_BACKEND"] (default 'django')

        Raises:
            ValueError: If backend type is invalid
        """
        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("PERSISTENCE_BACKEND", "django")

        logger.info(f"Creating persistence backend: {backend_type}")

        if backend_type == "django":
            return DjangoDocumentPersistence()
        elif backend_type == "memory":
            return InMemoryPersistence()
        else:
            raise ValueError(f"Invalid persistence backend: {backend_type}. Must be 'django' or 'memory'")
