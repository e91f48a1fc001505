from datetime import datetime, timedelta, timezone

import pytest

from watchtrack.core.errors import NotFoundError, ValidationError
from watchtrack.models.content import ContentKind
from watchtrack.models.profile import ProgressReport, WatchHistoryEntry

from ..fakes import new_id


def report(profile_id, content_id, progress=10, duration=100, episode_id=None, kind=ContentKind.MOVIE):
    return ProgressReport(
        profile_id=profile_id,
        content_id=content_id,
        content_type=kind,
        episode_id=episode_id,
        progress=progress,
        duration=duration,
    )


@pytest.mark.asyncio
async def test_repeated_reports_keep_one_entry(progress, accounts, account):
    profile_id = account.profiles[0].id
    content_id = new_id()

    await progress.report_progress(account.id, report(profile_id, content_id, progress=10))
    await progress.report_progress(account.id, report(profile_id, content_id, progress=50))

    history = accounts.profile(account.id).watch_history
    assert len(history) == 1
    assert history[0].progress == 50
    assert history[0].duration == 100


@pytest.mark.asyncio
async def test_episodes_are_separate_keys(progress, accounts, account):
    profile_id = account.profiles[0].id
    series_id, ep1, ep2 = new_id(), new_id(), new_id()

    for episode_id, seconds in [(ep1, 30), (ep2, 60), (ep1, 90), (None, 5)]:
        await progress.report_progress(
            account.id, report(profile_id, series_id, progress=seconds, episode_id=episode_id, kind=ContentKind.SERIES)
        )

    history = accounts.profile(account.id).watch_history
    assert [(e.episode_id, e.progress) for e in history] == [(ep1, 90), (ep2, 60), (None, 5)]


@pytest.mark.asyncio
async def test_update_keeps_list_position(progress, accounts, account):
    profile_id = account.profiles[0].id
    first, second = new_id(), new_id()
    await progress.report_progress(account.id, report(profile_id, first))
    await progress.report_progress(account.id, report(profile_id, second))
    await progress.report_progress(account.id, report(profile_id, first, progress=70))

    history = accounts.profile(account.id).watch_history
    assert [e.content_id for e in history] == [first, second]
    assert history[1].updated_at <= history[0].updated_at


@pytest.mark.asyncio
async def test_dangling_content_is_accepted(progress, accounts, account):
    await progress.report_progress(account.id, report(account.profiles[0].id, new_id()))
    assert len(accounts.profile(account.id).watch_history) == 1


@pytest.mark.asyncio
async def test_report_for_foreign_profile_is_not_found(progress, accounts, account):
    stranger = accounts.create()
    with pytest.raises(NotFoundError):
        await progress.report_progress(account.id, report(stranger.profiles[0].id, new_id()))


@pytest.mark.asyncio
async def test_report_rejects_malformed_content_id(progress, account):
    with pytest.raises(ValidationError):
        await progress.report_progress(account.id, report(account.profiles[0].id, "xyz"))


@pytest.mark.asyncio
async def test_continue_watching_orders_by_recency_and_drops_stale(progress, catalog, accounts, account):
    profile = accounts.profile(account.id)
    movie = catalog.add("Old Movie")
    series = catalog.add("Show", kind=ContentKind.SERIES)
    newest = catalog.add("New Movie")
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    profile.watch_history = [
        WatchHistoryEntry(content_id=movie.id, content_type=ContentKind.MOVIE, progress=1, duration=10,
                          updated_at=base),
        WatchHistoryEntry(content_id=new_id(), content_type=ContentKind.MOVIE, progress=2, duration=10,
                          updated_at=base + timedelta(hours=3)),
        WatchHistoryEntry(content_id=series.id, content_type=ContentKind.SERIES, episode_id=new_id(),
                          progress=3, duration=10, updated_at=base + timedelta(hours=1)),
        WatchHistoryEntry(content_id=newest.id, content_type=ContentKind.MOVIE, progress=4, duration=10,
                          updated_at=base + timedelta(hours=2)),
    ]

    items = await progress.continue_watching(profile, limit=10)

    assert [i.content.id for i in items] == [newest.id, series.id, movie.id]
    assert items[1].episode_id == profile.watch_history[2].episode_id
    assert items[0].progress_seconds == 4


@pytest.mark.asyncio
async def test_continue_watching_applies_limit_before_resolving(progress, catalog, accounts, account):
    profile = accounts.profile(account.id)
    kept = catalog.add("Kept")
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    profile.watch_history = [
        WatchHistoryEntry(content_id=kept.id, content_type=ContentKind.MOVIE, updated_at=base),
        WatchHistoryEntry(content_id=new_id(), content_type=ContentKind.MOVIE, updated_at=base + timedelta(1)),
    ]

    assert await progress.continue_watching(profile, limit=1) == []


@pytest.mark.asyncio
async def test_continue_watching_tie_break_is_stable(progress, catalog, accounts, account):
    profile = accounts.profile(account.id)
    a, b = catalog.add("A"), catalog.add("B")
    same = datetime(2024, 5, 5, tzinfo=timezone.utc)
    profile.watch_history = [
        WatchHistoryEntry(content_id=b.id, content_type=ContentKind.MOVIE, updated_at=same),
        WatchHistoryEntry(content_id=a.id, content_type=ContentKind.MOVIE, updated_at=same),
    ]

    first = [i.content.id for i in await progress.continue_watching(profile, limit=10)]
    second = [i.content.id for i in await progress.continue_watching(profile, limit=10)]
    assert first == second == sorted([a.id, b.id])
