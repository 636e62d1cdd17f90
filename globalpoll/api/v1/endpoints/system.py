"""Scheduler-triggered maintenance endpoints."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from globalpoll.api.deps import get_db, verify_cron_secret
from globalpoll.core.cache import invalidate_poll_views
from globalpoll.core.utils import utcnow
from globalpoll.schemas import CronResponse, InitResponse
from globalpoll.services.admin import bootstrap
from globalpoll.services.poll import sweep_expired

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_cron_secret)])


@router.get("/cron", response_model=CronResponse)
def cron_endpoint(db: Session = Depends(get_db)):
    """
    Archive expired polls.

    Meant for an external scheduler. Open unless CRON_SECRET is set, in
    which case ``Authorization: Bearer <CRON_SECRET>`` is required.
    """
    archived = sweep_expired(db)
    if archived:
        invalidate_poll_views()
        logger.info(f"Cache invalidated: poll views (reason: sweep archived {archived})")
    return CronResponse(message="Checked and archived expired polls", archived_poll_ids=archived)


@router.get("/init", response_model=InitResponse)
def init_endpoint(db: Session = Depends(get_db)):
    """Create the default admin if none exists, then archive expired polls."""
    result = bootstrap(db)
    if result["archived_poll_ids"]:
        invalidate_poll_views()
    return InitResponse(
        message="Initialization completed successfully",
        timestamp=utcnow(),
        admin_created=result["admin_created"],
        archived_poll_ids=result["archived_poll_ids"],
    )
