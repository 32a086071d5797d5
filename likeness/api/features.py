"""Feature flag and emotion taxonomy endpoints."""
from typing import List, get_args

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from likeness.core.config import FEATURE_DISPLAY_NAMES, FeatureFlags, feature_flag_status
from likeness.core.exceptions import FeatureDisabledError
from likeness.domain.entities.emotions import EmotionIntensity, available_emotions
from likeness.infrastructure.dependencies import get_feature_flags

router = APIRouter()


class FeatureStatus(BaseModel):
    name: str
    enabled: bool
    description: str


class EmotionTaxonomy(BaseModel):
    emotions: List[str]
    expanded: bool
    intensities: List[str]


def require_feature(flags: FeatureFlags, flag_name: str) -> None:
    """Raise FeatureDisabledError unless the named flag is on.

    Args:
        flags: Active feature flags
        flag_name: FeatureFlags field name, e.g. ``ENABLE_FULL_BODY``

    Raises:
        FeatureDisabledError: If the flag is off
    """
    if not getattr(flags, flag_name):
        raise FeatureDisabledError(
            f"{FEATURE_DISPLAY_NAMES[flag_name]} is disabled",
            details={"flag": flag_name},
        )


@router.get("/features", response_model=List[FeatureStatus], summary="List feature flags")
async def list_features(flags: FeatureFlags = Depends(get_feature_flags)) -> List[FeatureStatus]:
    return [FeatureStatus(**status) for status in feature_flag_status(flags)]


@router.get("/emotions", response_model=EmotionTaxonomy, summary="List available emotions")
async def list_emotions(flags: FeatureFlags = Depends(get_feature_flags)) -> EmotionTaxonomy:
    """Emotions offered for clip generation under the current flags."""
    return EmotionTaxonomy(
        emotions=available_emotions(flags.ENABLE_EXPANDED_EMOTIONS),
        expanded=flags.ENABLE_EXPANDED_EMOTIONS,
        intensities=list(get_args(EmotionIntensity)),
    )
