"""
Miniflux integration routes.

Handles connection settings, connection tests and on-demand sync.
"""

import dataclasses
import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from ..auth import verify_api_key
from ..config import get_db, get_miniflux_scheduler
from ..database import Database
from ..exceptions import miniflux_http_error
from ..miniflux import (
    MinifluxError,
    MinifluxNotConfigured,
    MinifluxSyncScheduler,
    load_miniflux_settings,
    save_miniflux_settings,
)
from ..schemas import (
    MinifluxConfigRequest,
    MinifluxStatusResponse,
    MinifluxSyncResponse,
    MinifluxTestResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/miniflux",
    tags=["miniflux"],
    dependencies=[Depends(verify_api_key)]
)

SchedulerDep = Annotated[MinifluxSyncScheduler, Depends(get_miniflux_scheduler)]


def _status(db: Database, scheduler: MinifluxSyncScheduler) -> MinifluxStatusResponse:
    settings = load_miniflux_settings(db)
    return MinifluxStatusResponse(
        configured=settings.is_configured,
        server_url=settings.server_url or None,
        enabled=settings.enabled,
        mark_read=settings.mark_read,
        sync_limit=settings.sync_limit,
        poll_interval_minutes=settings.poll_interval_minutes,
        is_polling=scheduler.is_running,
        is_syncing=scheduler.is_syncing,
        last_synced_at=scheduler.last_synced_at.isoformat() if scheduler.last_synced_at else None,
        last_error=scheduler.last_error,
        last_result=(
            MinifluxSyncResponse.from_result(scheduler.last_result)
            if scheduler.last_result else None
        ),
    )


@router.get("/status")
async def get_miniflux_status(
    db: Annotated[Database, Depends(get_db)],
    scheduler: SchedulerDep
) -> MinifluxStatusResponse:
    """Get Miniflux configuration and last sync outcome."""
    return _status(db, scheduler)


@router.put("/config")
async def update_miniflux_config(
    request: MinifluxConfigRequest,
    db: Annotated[Database, Depends(get_db)],
    scheduler: SchedulerDep,
    verify: bool = True
) -> MinifluxStatusResponse:
    """
    Update Miniflux connection settings.

    When verify is true and the resulting settings are complete, the server
    is contacted first and nothing is saved if it rejects the credentials.
    """
    candidate = dataclasses.replace(
        load_miniflux_settings(db),
        **{
            field: value
            for field, value in {
                "server_url": request.server_url,
                "api_key": request.api_key,
                "enabled": request.enabled,
                "mark_read": request.mark_read,
                "sync_limit": request.sync_limit,
                "poll_interval_minutes": request.poll_interval_minutes,
            }.items()
            if value is not None
        }
    )

    if verify and candidate.is_configured:
        try:
            await scheduler.client_factory(candidate).test_connection()
        except MinifluxError as e:
            logger.warning(f"Miniflux connection check failed: {e}")
            raise miniflux_http_error(e)

    save_miniflux_settings(
        db,
        server_url=request.server_url,
        api_key=request.api_key,
        enabled=request.enabled,
        mark_read=request.mark_read,
        sync_limit=request.sync_limit,
        poll_interval_minutes=request.poll_interval_minutes,
    )
    await scheduler.restart()

    return _status(db, scheduler)


@router.post("/test")
async def test_miniflux_connection(scheduler: SchedulerDep) -> MinifluxTestResponse:
    """Check that the configured Miniflux server accepts the API key."""
    try:
        client = scheduler.build_client()
    except MinifluxNotConfigured as e:
        raise miniflux_http_error(e)

    try:
        user = await client.get_me()
    except MinifluxError as e:
        return MinifluxTestResponse(success=False, message=str(e))

    username = user.get("username")
    return MinifluxTestResponse(
        success=True,
        username=username,
        message=f"Connected as {username}" if username else "Connected"
    )


@router.post("/sync")
async def sync_miniflux(scheduler: SchedulerDep) -> MinifluxSyncResponse:
    """Run one sync pass now."""
    try:
        result = await scheduler.run_once()
    except MinifluxError as e:
        logger.warning(f"Manual Miniflux sync failed: {e}")
        raise miniflux_http_error(e)

    return MinifluxSyncResponse.from_result(result)
