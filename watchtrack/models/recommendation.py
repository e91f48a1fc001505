from typing import Dict, List, Optional

from pydantic import Field

from .base import CamelModel
from .content import CatalogItem


class ContinueWatchingItem(CamelModel):
    content: CatalogItem
    progress_seconds: float
    duration_seconds: float
    episode_id: Optional[str] = None


class HomeFeed(CamelModel):
    trending: List[CatalogItem] = Field(default_factory=list)
    new_releases: List[CatalogItem] = Field(default_factory=list)
    trending_series: List[CatalogItem] = Field(default_factory=list)
    genre_rows: Dict[str, List[CatalogItem]] = Field(default_factory=dict)
    continue_watching: List[ContinueWatchingItem] = Field(default_factory=list)
    is_premium: bool = False
