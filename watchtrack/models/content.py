import enum
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from .base import CamelModel, stringify_ids


class ContentKind(str, enum.Enum):
    MOVIE = "Movie"
    SERIES = "Series"

    @property
    def collection(self) -> str:
        return "movies" if self is ContentKind.MOVIE else "series"


class CatalogItem(CamelModel):
    """
    A movie or series document as read from the catalog.

    Only the fields the discovery logic needs are typed; everything else on
    the document (posters, seasons, external asset ids...) rides along as extras.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    content_type: ContentKind
    title: str = ""
    genres: List[str] = Field(default_factory=list)
    is_published: bool = True
    is_premium: bool = False
    views: int = 0

    @property
    def primary_genre(self) -> Optional[str]:
        return self.genres[0] if self.genres else None

    @classmethod
    def from_document(cls, doc: Dict[str, Any], kind: ContentKind) -> "CatalogItem":
        data = stringify_ids(dict(doc))
        data["id"] = str(data.pop("_id"))
        data["content_type"] = kind
        return cls.model_validate(data)
