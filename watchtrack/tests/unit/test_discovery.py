import pytest

from watchtrack.core.errors import NotFoundError
from watchtrack.models.content import ContentKind
from watchtrack.models.profile import MyListEntry, WatchHistoryEntry

from ..fakes import new_id


def watchlist(*items):
    return [MyListEntry(content_id=i.id, content_type=i.content_type) for i in items]


def watched(*items):
    return [WatchHistoryEntry(content_id=i.id, content_type=i.content_type, progress=1, duration=2) for i in items]


@pytest.mark.asyncio
async def test_watchlist_tier_fills_before_genre_and_trending(discovery, catalog, accounts, account):
    a = catalog.add("A", genres=["Documentary"], views=1)
    b = catalog.add("B", genres=["Drama"], views=2)
    c = catalog.add("C", genres=["Drama"], views=3)
    trending = catalog.add("Hit", genres=["Comedy"], views=500)
    catalog.add("Minor", genres=["Comedy"], views=10)
    accounts.profile(account.id).my_list = watchlist(a, b)

    items = await discovery.related_content(account.id, c.id, ContentKind.MOVIE, limit=3)

    assert [i.id for i in items] == [a.id, b.id, trending.id]


@pytest.mark.asyncio
async def test_watchlist_item_outranks_genre_match(discovery, catalog, accounts, account):
    source = catalog.add("Source", genres=["Horror"])
    genre_match = catalog.add("Scary", genres=["Horror"], views=1000)
    favourite = catalog.add("Unrelated", genres=["Musical"])
    accounts.profile(account.id).my_list = watchlist(favourite)

    items = await discovery.related_content(account.id, source.id, ContentKind.MOVIE, limit=2)

    assert [i.id for i in items] == [favourite.id, genre_match.id]


@pytest.mark.asyncio
async def test_related_never_repeats_or_returns_source(discovery, catalog, accounts, account):
    source = catalog.add("Source", genres=["Action"], views=900)
    listed = catalog.add("Listed", genres=["Action"], views=800)
    other = catalog.add("Other", genres=["Action"], views=700)
    accounts.profile(account.id).my_list = watchlist(source, listed)

    items = await discovery.related_content(account.id, source.id, ContentKind.MOVIE, limit=10)

    ids = [i.id for i in items]
    assert ids == [listed.id, other.id]
    assert len(ids) == len(set(ids))


@pytest.mark.asyncio
async def test_related_uses_primary_genre_only(discovery, catalog, account):
    source = catalog.add("Source", genres=["Drama", "Romance"])
    drama = catalog.add("Drama", genres=["Drama"], views=1)
    romance = catalog.add("Romance", genres=["Romance"], views=0)

    items = await discovery.related_content(account.id, source.id, ContentKind.MOVIE, limit=1)

    assert [i.id for i in items] == [drama.id]
    assert romance.id not in [i.id for i in items]


@pytest.mark.asyncio
async def test_related_excludes_unpublished(discovery, catalog, accounts, account):
    source = catalog.add("Source", genres=["Action"])
    hidden = catalog.add("Hidden", genres=["Action"], views=999, is_published=False)
    draft = catalog.add("Draft", is_published=False)
    accounts.profile(account.id).my_list = watchlist(draft)

    items = await discovery.related_content(account.id, source.id, ContentKind.MOVIE, limit=10)

    assert hidden.id not in [i.id for i in items]
    assert draft.id not in [i.id for i in items]


@pytest.mark.asyncio
async def test_watchlist_tier_capped_per_type(discovery, catalog, accounts, account):
    source = catalog.add("Source")
    movies = [catalog.add(f"M{i}") for i in range(7)]
    shows = [catalog.add(f"S{i}", kind=ContentKind.SERIES) for i in range(2)]
    accounts.profile(account.id).my_list = watchlist(*movies, *shows)

    items = await discovery.related_content(account.id, source.id, ContentKind.MOVIE, limit=7)

    assert [i.id for i in items] == [m.id for m in movies[:5]] + [s.id for s in shows]


@pytest.mark.asyncio
async def test_related_unknown_source(discovery, account):
    with pytest.raises(NotFoundError):
        await discovery.related_content(account.id, new_id(), ContentKind.SERIES)


@pytest.mark.asyncio
async def test_cold_start_returns_trending(discovery, catalog, account):
    low = catalog.add("Low", views=1)
    high = catalog.add("High", views=100)
    show = catalog.add("Show", kind=ContentKind.SERIES, views=50)

    items = await discovery.collaborative_recommendations(account.id, limit=10)

    assert [i.id for i in items] == [high.id, show.id, low.id]


@pytest.mark.asyncio
async def test_neighbors_drive_recommendations(discovery, catalog, accounts, account):
    shared = catalog.add("Shared")
    neighbor_pick = catalog.add("Neighbor pick", views=1)
    neighbor_show = catalog.add("Neighbor show", kind=ContentKind.SERIES, views=2)
    stranger_pick = catalog.add("Stranger pick", views=3)
    popular = catalog.add("Popular", views=1000)

    accounts.profile(account.id).watch_history = watched(shared)
    neighbor = accounts.create()
    neighbor.profiles[0].watch_history = watched(shared, neighbor_pick, neighbor_show)
    stranger = accounts.create()
    stranger.profiles[0].watch_history = watched(stranger_pick)

    items = await discovery.collaborative_recommendations(account.id, limit=3)

    ids = [i.id for i in items]
    assert ids[:2] == [neighbor_pick.id, neighbor_show.id]
    assert ids[2] == popular.id
    assert shared.id not in ids
    assert stranger_pick.id not in ids


@pytest.mark.asyncio
async def test_sibling_profile_counts_as_neighbor(discovery, catalog, accounts, account):
    shared = catalog.add("Shared")
    sibling_pick = catalog.add("Sibling pick")
    accounts.profile(account.id, 0).watch_history = watched(shared)
    accounts.profile(account.id, 1).watch_history = watched(shared, sibling_pick)

    items = await discovery.collaborative_recommendations(account.id, limit=1)

    assert [i.id for i in items] == [sibling_pick.id]


@pytest.mark.asyncio
async def test_padding_skips_watched_titles(discovery, catalog, accounts, account):
    seen = catalog.add("Seen", views=10_000)
    fresh = catalog.add("Fresh", views=5)
    accounts.profile(account.id).watch_history = watched(seen)

    items = await discovery.collaborative_recommendations(account.id, limit=5)

    assert [i.id for i in items] == [fresh.id]


@pytest.mark.asyncio
async def test_recommendations_for_unknown_profile(discovery, account):
    with pytest.raises(NotFoundError):
        await discovery.collaborative_recommendations(account.id, profile_id=new_id())
