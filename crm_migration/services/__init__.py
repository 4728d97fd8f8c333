"""Service layer for the dry-run engine."""

from .normalizer import FieldProfile, RecordNormalizer, is_usable_name
from .store import InternalStore, InMemoryStore
from .matcher import DuplicateMatcher
from .validator import FieldValidator
from .mapping import SampleMappingBuilder, map_job_status, JOB_STATUS_MAP

__all__ = [
    "FieldProfile",
    "RecordNormalizer",
    "is_usable_name",
    "InternalStore",
    "InMemoryStore",
    "DuplicateMatcher",
    "FieldValidator",
    "SampleMappingBuilder",
    "map_job_status",
    "JOB_STATUS_MAP",
]
