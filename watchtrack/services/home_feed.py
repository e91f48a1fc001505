import json
import logging
from typing import Dict, List, Optional

from ..core.config import settings
from ..models.content import CatalogItem, ContentKind
from ..models.recommendation import HomeFeed
from ..repositories.accounts import AccountRepository
from ..repositories.catalog import CatalogRepository
from .profiles import resolve_profile
from .progress import ProgressService

logger = logging.getLogger(__name__)

CACHE_KEY = "home:rows"


class HomeFeedService:
    """
    Home screen rows. The catalog rows are identical for every caller and are
    cached in Redis; continue-watching is per profile and always fresh.
    """

    def __init__(
        self,
        accounts: AccountRepository,
        catalog: CatalogRepository,
        progress: ProgressService,
        redis=None,
        row_limit: int = settings.CONTINUE_WATCHING_LIMIT,
        genres: Optional[List[str]] = None,
        cache_ttl: int = settings.HOME_FEED_CACHE_TTL,
    ):
        self.accounts = accounts
        self.catalog = catalog
        self.progress = progress
        self.redis = redis
        self.row_limit = row_limit
        self.genres = genres if genres is not None else list(settings.HOME_FEED_GENRES)
        self.cache_ttl = cache_ttl

    async def build(self, account_id: str, profile_id: Optional[str] = None) -> HomeFeed:
        account, profile = await resolve_profile(self.accounts, account_id, profile_id)
        rows = await self._catalog_rows()
        continue_watching = await self.progress.continue_watching(profile, self.row_limit)
        return HomeFeed(
            trending=rows["trending"],
            new_releases=rows["new_releases"],
            trending_series=rows["trending_series"],
            genre_rows=rows["genre_rows"],
            continue_watching=continue_watching,
            is_premium=account.is_premium,
        )

    async def _catalog_rows(self) -> Dict:
        cached = await self._cache_get()
        if cached is not None:
            return cached

        rows = {
            "trending": await self.catalog.find_trending(self.row_limit, kinds=(ContentKind.MOVIE,)),
            "new_releases": await self.catalog.find_latest(ContentKind.MOVIE, self.row_limit),
            "trending_series": await self.catalog.find_trending(self.row_limit, kinds=(ContentKind.SERIES,)),
            "genre_rows": {
                genre: await self.catalog.find_by_genre(ContentKind.MOVIE, genre, self.row_limit)
                for genre in self.genres
            },
        }
        await self._cache_set(rows)
        return rows

    async def _cache_get(self) -> Optional[Dict]:
        if self.redis is None:
            return None
        try:
            raw = await self.redis.get(CACHE_KEY)
        except Exception as e:
            logger.warning(f"Home feed cache read failed: {str(e)}")
            return None
        if not raw:
            return None

        def load(items):
            return [CatalogItem.model_validate(item) for item in items]

        try:
            data = json.loads(raw)
            return {
                "trending": load(data["trending"]),
                "new_releases": load(data["new_releases"]),
                "trending_series": load(data["trending_series"]),
                "genre_rows": {genre: load(items) for genre, items in data["genre_rows"].items()},
            }
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            # Corrupt or older-shape entry; rebuilt and overwritten by the caller
            logger.warning(f"Discarding unreadable home feed cache entry: {str(e)}")
            return None

    async def _cache_set(self, rows: Dict) -> None:
        if self.redis is None:
            return

        def dump(items):
            return [item.model_dump(mode="json") for item in items]

        payload = {
            "trending": dump(rows["trending"]),
            "new_releases": dump(rows["new_releases"]),
            "trending_series": dump(rows["trending_series"]),
            "genre_rows": {genre: dump(items) for genre, items in rows["genre_rows"].items()},
        }
        try:
            await self.redis.setex(CACHE_KEY, self.cache_ttl, json.dumps(payload))
        except Exception as e:
            logger.warning(f"Home feed cache write failed: {str(e)}")
