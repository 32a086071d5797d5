"""Domain entities package."""
from .profile import ActorProfile, EmotionClipData, MotorTraits, TrainingVideos

__all__ = ["ActorProfile", "EmotionClipData", "MotorTraits", "TrainingVideos"]
