"""
Related-content and collaborative recommendation views.

Both are read-time projections over watch history, my list and the catalog;
nothing here is persisted. Each view fills its page tier by tier and never
returns the same title twice.
"""

import logging
from typing import Dict, List, Optional, Set

from ..core.config import settings
from ..core.errors import NotFoundError
from ..models.content import CatalogItem, ContentKind
from ..repositories.accounts import AccountRepository
from ..repositories.catalog import CatalogRepository
from .profiles import require_object_id, resolve_entries, resolve_profile

logger = logging.getLogger(__name__)


class RankedPage:
    """An ordered, duplicate-free page of titles with a fixed capacity."""

    def __init__(self, limit: int, exclude: Optional[Set[str]] = None):
        self.limit = limit
        self.items: List[CatalogItem] = []
        self.seen: Set[str] = set(exclude or ())

    @property
    def remaining(self) -> int:
        return max(self.limit - len(self.items), 0)

    @property
    def full(self) -> bool:
        return self.remaining == 0

    def extend(self, items: List[CatalogItem]) -> int:
        added = 0
        for item in items:
            if self.full:
                break
            if item.id in self.seen:
                continue
            self.items.append(item)
            self.seen.add(item.id)
            added += 1
        return added


class DiscoveryAggregator:
    def __init__(
        self,
        accounts: AccountRepository,
        catalog: CatalogRepository,
        watchlist_cap_per_type: int = settings.RELATED_WATCHLIST_CAP_PER_TYPE,
    ):
        self.accounts = accounts
        self.catalog = catalog
        self.watchlist_cap_per_type = watchlist_cap_per_type

    async def related_content(
        self,
        account_id: str,
        content_id: str,
        content_type: ContentKind,
        profile_id: Optional[str] = None,
        limit: int = settings.DISCOVERY_DEFAULT_LIMIT,
    ) -> List[CatalogItem]:
        """
        Titles related to a source title, filled in strict tier order:
        the profile's watchlist, then the source's primary genre, then
        globally trending titles.
        """
        require_object_id(content_id, "contentId")
        source = await self.catalog.find_by_id(content_type, content_id)
        if not source:
            raise NotFoundError(content_type.value, content_id)
        _, profile = await resolve_profile(self.accounts, account_id, profile_id)

        page = RankedPage(limit, exclude={source.id})

        # Tier 1: watchlist, in insertion order, capped per content type
        refs = [
            (entry.content_id, entry.content_type)
            for entry in profile.my_list
            if entry.content_id != source.id
        ]
        if refs and not page.full:
            per_type: Dict[ContentKind, int] = {}
            picks = []
            for item in await resolve_entries(self.catalog, refs):
                if per_type.get(item.content_type, 0) >= self.watchlist_cap_per_type:
                    continue
                per_type[item.content_type] = per_type.get(item.content_type, 0) + 1
                picks.append(item)
            page.extend(picks)

        # Tier 2: same primary genre as the source
        genre = source.primary_genre
        if genre and not page.full:
            page.extend(await self.catalog.find_by_genre(
                source.content_type, genre, page.remaining, exclude_ids=page.seen
            ))

        # Tier 3: trending filler
        if not page.full:
            page.extend(await self.catalog.find_trending(page.remaining, exclude_ids=page.seen))

        logger.debug(f"Related content for {content_id}: {len(page.items)} of {limit}")
        return page.items

    async def collaborative_recommendations(
        self,
        account_id: str,
        profile_id: Optional[str] = None,
        limit: int = settings.DISCOVERY_DEFAULT_LIMIT,
    ) -> List[CatalogItem]:
        """
        Titles watched by neighbor profiles (any profile sharing at least one
        watched title) that this profile has not watched, padded with
        trending titles. Membership is binary; neighbors are not weighted.
        """
        _, profile = await resolve_profile(self.accounts, account_id, profile_id)

        watched: List[str] = []
        for entry in profile.watch_history:
            if entry.content_id not in watched:
                watched.append(entry.content_id)

        if not watched:
            return await self.catalog.find_trending(limit)

        co_watched = await self.accounts.find_co_watched_content(watched, profile.id)
        candidates = sorted(co_watched - set(watched))

        page = RankedPage(limit, exclude=set(watched))
        if candidates:
            for kind in (ContentKind.MOVIE, ContentKind.SERIES):
                if page.full:
                    break
                page.extend(await self.catalog.find_by_ids(kind, candidates, limit=limit))

        if not page.full:
            page.extend(await self.catalog.find_trending(page.remaining, exclude_ids=page.seen))

        logger.debug(
            f"Collaborative recommendations for profile {profile.id}: "
            f"{len(candidates)} candidates, {len(page.items)} returned"
        )
        return page.items
