import logging
from typing import List

from ..core.monitoring import PROGRESS_REPORTS
from ..models.base import utcnow
from ..models.profile import Profile, ProgressReport, WatchHistoryEntry
from ..models.recommendation import ContinueWatchingItem
from ..repositories.accounts import AccountRepository
from ..repositories.catalog import CatalogRepository
from .profiles import require_object_id, resolve_profile

logger = logging.getLogger(__name__)


def by_recency(entries: List[WatchHistoryEntry]) -> List[WatchHistoryEntry]:
    """Most recently updated first; equal timestamps fall back to the entry key."""
    ordered = sorted(entries, key=lambda e: (e.content_id, e.episode_id or ""))
    return sorted(ordered, key=lambda e: e.updated_at, reverse=True)


class ProgressService:
    def __init__(self, accounts: AccountRepository, catalog: CatalogRepository):
        self.accounts = accounts
        self.catalog = catalog

    async def report_progress(self, account_id: str, report: ProgressReport) -> WatchHistoryEntry:
        """
        Upsert the watch-history entry keyed by (contentId, episodeId).

        An existing entry is overwritten in place so its list position is kept;
        a new key is appended. The content reference is not checked against the
        catalog, dangling ids are dropped when the history is rendered.
        """
        require_object_id(report.profile_id, "profileId")
        require_object_id(report.content_id, "contentId")
        if report.episode_id is not None:
            require_object_id(report.episode_id, "episodeId")

        _, profile = await resolve_profile(self.accounts, account_id, report.profile_id)

        history = list(profile.watch_history)
        entry = WatchHistoryEntry(
            content_id=report.content_id,
            content_type=report.content_type,
            episode_id=report.episode_id,
            progress=report.progress,
            duration=report.duration,
            updated_at=utcnow(),
        )
        index = profile.find_history(report.content_id, report.episode_id)
        if index is None:
            history.append(entry)
            PROGRESS_REPORTS.labels(outcome="inserted").inc()
        else:
            history[index] = entry
            PROGRESS_REPORTS.labels(outcome="updated").inc()

        await self.accounts.save_watch_history(account_id, profile.id, history)
        return entry

    async def get_watch_history(self, account_id: str, profile_id: str) -> List[WatchHistoryEntry]:
        _, profile = await resolve_profile(self.accounts, account_id, profile_id)
        return profile.watch_history

    async def continue_watching(self, profile: Profile, limit: int) -> List[ContinueWatchingItem]:
        items = []
        for entry in by_recency(profile.watch_history)[:limit]:
            content = await self.catalog.find_by_id(entry.content_type, entry.content_id)
            if not content:
                logger.debug(f"Dropping stale history entry {entry.content_id} for profile {profile.id}")
                continue
            items.append(ContinueWatchingItem(
                content=content,
                progress_seconds=entry.progress,
                duration_seconds=entry.duration,
                episode_id=entry.episode_id,
            ))
        return items
