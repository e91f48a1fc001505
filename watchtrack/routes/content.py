from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.auth import CurrentAccount, get_current_account
from ..core.config import settings
from ..dependencies import get_catalog_service, get_discovery_aggregator, get_home_feed_service
from ..models.content import ContentKind
from ..services.catalog import CatalogService
from ..services.discovery import DiscoveryAggregator
from ..services.home_feed import HomeFeedService
from . import success

router = APIRouter(tags=["content"])


@router.get("/home")
async def get_home_feed(
    profile_id: Optional[str] = Query(None, alias="profileId"),
    current: CurrentAccount = Depends(get_current_account),
    home: HomeFeedService = Depends(get_home_feed_service),
):
    """Trending, new releases, genre rows and continue watching for a profile."""
    feed = await home.build(current.account_id, profile_id)
    return success(feed)


@router.get("/recommendations")
async def get_recommendations(
    profile_id: Optional[str] = Query(None, alias="profileId"),
    limit: int = Query(settings.DISCOVERY_DEFAULT_LIMIT, ge=1, le=50),
    current: CurrentAccount = Depends(get_current_account),
    discovery: DiscoveryAggregator = Depends(get_discovery_aggregator),
):
    """Titles watched by profiles with overlapping history."""
    items = await discovery.collaborative_recommendations(current.account_id, profile_id, limit)
    return success(items)


@router.get("/content/{content_id}/related")
async def get_related_content(
    content_id: str,
    content_type: ContentKind = Query(..., alias="type"),
    profile_id: Optional[str] = Query(None, alias="profileId"),
    limit: int = Query(settings.DISCOVERY_DEFAULT_LIMIT, ge=1, le=50),
    current: CurrentAccount = Depends(get_current_account),
    discovery: DiscoveryAggregator = Depends(get_discovery_aggregator),
):
    items = await discovery.related_content(
        current.account_id, content_id, content_type, profile_id=profile_id, limit=limit
    )
    return success(items)


@router.get("/movies/{content_id}")
async def get_movie(
    content_id: str,
    current: CurrentAccount = Depends(get_current_account),
    catalog: CatalogService = Depends(get_catalog_service),
):
    movie = await catalog.open_title(current.account_id, ContentKind.MOVIE, content_id)
    return success({"movie": movie})


@router.get("/series/{content_id}")
async def get_series(
    content_id: str,
    current: CurrentAccount = Depends(get_current_account),
    catalog: CatalogService = Depends(get_catalog_service),
):
    series = await catalog.open_title(current.account_id, ContentKind.SERIES, content_id)
    return success({"series": series})
