"""API v1 router initialization."""
from fastapi import APIRouter

from .analysis import analysis_router, identity_router
from .features import router as features_router
from .generation import router as generation_router
from .profiles import router as profiles_router

# Create v1 router
router = APIRouter()

router.include_router(generation_router, prefix="/generation", tags=["generation"])
router.include_router(analysis_router, prefix="/analysis", tags=["analysis"])
router.include_router(identity_router, prefix="/identity", tags=["identity"])
router.include_router(profiles_router, prefix="/profiles", tags=["profiles"])
router.include_router(features_router, tags=["features"])
