import pytest

from watchtrack.services.catalog import CatalogService
from watchtrack.services.discovery import DiscoveryAggregator
from watchtrack.services.playback_tracker import PlaybackTracker
from watchtrack.services.profiles import ProfileService
from watchtrack.services.progress import ProgressService

from .fakes import InMemoryAccounts, InMemoryCatalog, InMemoryPlayback


@pytest.fixture
def accounts():
    return InMemoryAccounts()


@pytest.fixture
def catalog():
    return InMemoryCatalog()


@pytest.fixture
def sessions():
    return InMemoryPlayback()


@pytest.fixture
def account(accounts):
    return accounts.create(profiles=2, email="viewer@example.com")


@pytest.fixture
def tracker(sessions, accounts):
    return PlaybackTracker(sessions, accounts, error_history_limit=3)


@pytest.fixture
def progress(accounts, catalog):
    return ProgressService(accounts, catalog)


@pytest.fixture
def profiles(accounts, catalog):
    return ProfileService(accounts, catalog, max_profiles=5)


@pytest.fixture
def discovery(accounts, catalog):
    return DiscoveryAggregator(accounts, catalog, watchlist_cap_per_type=5)


@pytest.fixture
def catalog_service(catalog, accounts):
    return CatalogService(catalog, accounts)
