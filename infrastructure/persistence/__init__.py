"""
Persistence Abstraction Layer
=============================

Provides a unified interface for document persistence (database, in-memory).
"""

from .django_adapter import DjangoDocumentPersistence
from .factory import PersistenceFactory
from .interface import PersistenceException, PersistenceInterface
from .memory_adapter import InMemoryPersistence

__all__ = [
    "PersistenceInterface",
    "PersistenceException",
    "DjangoDocumentPersistence",
    "InMemoryPersistence",
    "PersistenceFactory",
]
