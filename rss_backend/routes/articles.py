"""
Article routes: listing, detail, hiding.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ..auth import verify_api_key
from ..config import get_db
from ..database import Database
from ..exceptions import require_article
from ..schemas import (
    ArticleFilter,
    ArticleResponse,
    ArticleDetailResponse,
    HideArticleRequest,
)

router = APIRouter(prefix="/articles", tags=["articles"], dependencies=[Depends(verify_api_key)])


@router.get("")
async def list_articles(
    db: Annotated[Database, Depends(get_db)],
    filter: ArticleFilter = "",
    feed_id: int | None = None,
    category: str | None = None,
    show_hidden: bool = False,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0)
) -> list[ArticleResponse]:
    """List articles with optional filters."""
    articles = db.get_articles(
        filter=filter,
        feed_id=feed_id,
        category=category,
        show_hidden=show_hidden,
        limit=limit,
        offset=offset
    )
    return [ArticleResponse.from_db(a) for a in articles]


@router.get("/{article_id}")
async def get_article(
    article_id: int,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleDetailResponse:
    """Get article with content."""
    article = require_article(db.get_article(article_id))
    return ArticleDetailResponse.from_db(article)


@router.post("/{article_id}/hide")
async def hide_article(
    article_id: int,
    request: HideArticleRequest,
    db: Annotated[Database, Depends(get_db)]
) -> dict:
    """Hide an article from default listings (or unhide it)."""
    require_article(db.get_article(article_id))
    db.set_article_hidden(article_id, request.hidden)
    return {"success": True, "is_hidden": request.hidden}
