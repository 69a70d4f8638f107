"""Service for cleanup operations."""
import logging
import threading

from prep_admin.config import BUILDER_CLEANUP_INTERVAL_SECONDS
from prep_admin.services.test_builder import BuilderRegistry

logger = logging.getLogger(__name__)


def cleanup_builders(registry: BuilderRegistry) -> int:
    """Drop builder drafts idle for longer than the registry's TTL."""
    try:
        removed = registry.expire()
    except Exception as e:
        logger.error(f"Failed to clean up builder drafts: {e}")
        return 0
    if removed > 0:
        logger.info(f"Cleaned up {removed} idle builder drafts")
    return removed


def schedule_builder_cleanup(
    registry: BuilderRegistry,
    interval: float = BUILDER_CLEANUP_INTERVAL_SECONDS,
) -> threading.Event:
    """Start periodic draft cleanup; set the returned event to stop it."""
    stop = threading.Event()

    def _worker() -> None:
        while not stop.wait(interval):
            cleanup_builders(registry)

    thread = threading.Thread(
        target=_worker,
        name="builder_cleanup",
        daemon=True,
    )
    thread.start()
    return stop
