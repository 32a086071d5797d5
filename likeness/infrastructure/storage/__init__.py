"""Profile store implementations."""
from .memory import InMemoryProfileStore
from .s3 import S3ProfileStore

__all__ = ["InMemoryProfileStore", "S3ProfileStore"]
