"""FastAPI providers for repositories and services, overridable in tests."""

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from .db.mongodb import get_mongodb
from .db.redis import get_redis
from .repositories.accounts import AccountRepository
from .repositories.catalog import CatalogRepository
from .repositories.playback import PlaybackRepository
from .services.catalog import CatalogService
from .services.discovery import DiscoveryAggregator
from .services.home_feed import HomeFeedService
from .services.playback_tracker import PlaybackTracker
from .services.profiles import ProfileService
from .services.progress import ProgressService


async def get_account_repository(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> AccountRepository:
    return AccountRepository(db)


async def get_catalog_repository(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> CatalogRepository:
    return CatalogRepository(db)


async def get_playback_repository(db: AsyncIOMotorDatabase = Depends(get_mongodb)) -> PlaybackRepository:
    return PlaybackRepository(db)


async def get_playback_tracker(
    sessions: PlaybackRepository = Depends(get_playback_repository),
    accounts: AccountRepository = Depends(get_account_repository),
) -> PlaybackTracker:
    return PlaybackTracker(sessions, accounts)


async def get_progress_service(
    accounts: AccountRepository = Depends(get_account_repository),
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> ProgressService:
    return ProgressService(accounts, catalog)


async def get_profile_service(
    accounts: AccountRepository = Depends(get_account_repository),
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> ProfileService:
    return ProfileService(accounts, catalog)


async def get_discovery_aggregator(
    accounts: AccountRepository = Depends(get_account_repository),
    catalog: CatalogRepository = Depends(get_catalog_repository),
) -> DiscoveryAggregator:
    return DiscoveryAggregator(accounts, catalog)


async def get_catalog_service(
    catalog: CatalogRepository = Depends(get_catalog_repository),
    accounts: AccountRepository = Depends(get_account_repository),
) -> CatalogService:
    return CatalogService(catalog, accounts)


async def get_home_feed_service(
    accounts: AccountRepository = Depends(get_account_repository),
    catalog: CatalogRepository = Depends(get_catalog_repository),
    progress: ProgressService = Depends(get_progress_service),
    redis=Depends(get_redis),
) -> HomeFeedService:
    return HomeFeedService(accounts, catalog, progress, redis=redis)
