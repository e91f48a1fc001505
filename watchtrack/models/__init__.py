from .content import CatalogItem, ContentKind
from .playback import PlaybackError, PlaybackSession, PlaybackStart, PlaybackUpdate
from .profile import Account, MyListEntry, Profile, ProgressReport, WatchHistoryEntry
from .recommendation import ContinueWatchingItem, HomeFeed

__all__ = [
    'CatalogItem',
    'ContentKind',
    'PlaybackError',
    'PlaybackSession',
    'PlaybackStart',
    'PlaybackUpdate',
    'Account',
    'MyListEntry',
    'Profile',
    'ProgressReport',
    'WatchHistoryEntry',
    'ContinueWatchingItem',
    'HomeFeed',
]
