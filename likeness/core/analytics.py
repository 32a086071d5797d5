"""Usage analytics emitted as structured log events."""
from likeness.core.config import settings
from likeness.core.logging import get_logger

logger = get_logger("likeness.analytics")


def track_event(event: str, **fields: object) -> None:
    """Record an analytics event when the analytics feature is enabled.

    Args:
        event: Event name, e.g. ``clips_generated``
        **fields: Event properties
    """
    if not settings.FEATURES.ENABLE_ANALYTICS:
        return
    logger.info("analytics_event", analytics_event=event, **fields)
