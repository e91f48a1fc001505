from .accounts import AccountRepository
from .catalog import CatalogRepository
from .playback import PlaybackRepository

__all__ = ["AccountRepository", "CatalogRepository", "PlaybackRepository"]
