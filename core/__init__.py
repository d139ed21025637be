"""
Core package for the MSP revenue roadmap.
Contains configuration, logging, error types and the persistence layer.
"""

from .config import (
    RevenueBand,
    RiskLevel,
    SYSTEM_FLAGS,
    METRIC_THRESHOLDS,
    PHASE_COUNT
)
from .exceptions import (
    RoadmapError,
    InputValidationError,
    StorageError,
    CatalogMismatchError
)
from .storage import KeyValueStore, InMemoryStore, MongoKeyValueStore, get_store
from .repository import StateRepository

__all__ = [
    'RevenueBand',
    'RiskLevel',
    'SYSTEM_FLAGS',
    'METRIC_THRESHOLDS',
    'PHASE_COUNT',
    'RoadmapError',
    'InputValidationError',
    'StorageError',
    'CatalogMismatchError',
    'KeyValueStore',
    'InMemoryStore',
    'MongoKeyValueStore',
    'get_store',
    'StateRepository'
]
