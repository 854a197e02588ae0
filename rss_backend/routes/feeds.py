"""
Feed routes: read access to local feeds, including mirrored Miniflux feeds.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from ..auth import verify_api_key
from ..config import get_db
from ..database import Database
from ..exceptions import require_feed
from ..schemas import FeedResponse

router = APIRouter(prefix="/feeds", tags=["feeds"], dependencies=[Depends(verify_api_key)])


@router.get("")
async def list_feeds(
    db: Annotated[Database, Depends(get_db)]
) -> list[FeedResponse]:
    """List all feeds."""
    feeds = db.get_feeds()
    return [FeedResponse.from_db(f) for f in feeds]


@router.get("/{feed_id}")
async def get_feed(
    feed_id: int,
    db: Annotated[Database, Depends(get_db)]
) -> FeedResponse:
    """Get a single feed."""
    feed = require_feed(db.get_feed(feed_id))
    return FeedResponse.from_db(feed)
