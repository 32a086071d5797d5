"""Service interfaces package."""
from .gateway import ModelGateway
from .storage import ProfileStore

__all__ = ["ModelGateway", "ProfileStore"]
