"""Startup bootstrap and the optional in-process expiry sweeper."""
import asyncio
from typing import List

from globalpoll.core.cache import invalidate_poll_views
from globalpoll.core.logging_config import get_logger
from globalpoll.db import get_db_context
from globalpoll.services.admin import bootstrap
from globalpoll.services.poll import sweep_expired

logger = get_logger(__name__)


def run_startup_tasks() -> None:
    """Ensure the default admin exists and archive polls that expired while down."""
    try:
        with get_db_context() as db:
            result = bootstrap(db)
    except Exception:
        # The API still serves reads; /api/init can be retried once the database is reachable
        logger.exception("startup_tasks_failed")
        return

    if result["archived_poll_ids"]:
        invalidate_poll_views()
    logger.info("startup_tasks_completed", **result)


def sweep_once() -> List[int]:
    """Run one expiry sweep in a fresh session."""
    with get_db_context() as db:
        archived = sweep_expired(db)
    if archived:
        invalidate_poll_views()
    return archived


async def run_periodic_sweep(interval_seconds: float) -> None:
    """Sweep expired polls every ``interval_seconds`` until cancelled."""
    logger.info("expiry_sweeper_started", interval_seconds=interval_seconds)
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(sweep_once)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("expiry_sweep_failed")
