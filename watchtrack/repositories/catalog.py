"""
MongoDB access to the movie and series collections.

Movies and series live in separate collections without a shared base
document; every lookup dispatches on ContentKind to pick the collection.
All listing queries only ever return published titles.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from ..models.base import is_object_id
from ..models.content import CatalogItem, ContentKind

logger = logging.getLogger(__name__)

ALL_KINDS = (ContentKind.MOVIE, ContentKind.SERIES)


def _object_ids(ids: Iterable[str]) -> List[ObjectId]:
    return [ObjectId(i) for i in ids if is_object_id(i)]


class CatalogRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    def _collection(self, kind: ContentKind):
        return self.db[kind.collection]

    async def find_by_id(self, kind: ContentKind, content_id: str) -> Optional[CatalogItem]:
        if not is_object_id(content_id):
            return None
        doc = await self._collection(kind).find_one({"_id": ObjectId(content_id)})
        return CatalogItem.from_document(doc, kind) if doc else None

    async def find_any(self, content_id: str) -> Optional[CatalogItem]:
        """Resolve an id whose kind is unknown, movies first."""
        for kind in ALL_KINDS:
            item = await self.find_by_id(kind, content_id)
            if item:
                return item
        return None

    async def find_by_ids(
        self,
        kind: ContentKind,
        content_ids: Sequence[str],
        limit: int = 0,
        exclude_ids: Iterable[str] = (),
    ) -> List[CatalogItem]:
        query = {
            "_id": {"$in": _object_ids(content_ids), "$nin": _object_ids(exclude_ids)},
            "is_published": True,
        }
        cursor = self._collection(kind).find(query)
        if limit:
            cursor = cursor.limit(limit)
        return [CatalogItem.from_document(doc, kind) async for doc in cursor]

    async def find_by_genre(
        self,
        kind: ContentKind,
        genre: str,
        limit: int,
        exclude_ids: Iterable[str] = (),
    ) -> List[CatalogItem]:
        if limit <= 0:
            return []
        query = {"is_published": True, "genres": genre, "_id": {"$nin": _object_ids(exclude_ids)}}
        cursor = self._collection(kind).find(query).sort("views", DESCENDING).limit(limit)
        return [CatalogItem.from_document(doc, kind) async for doc in cursor]

    async def find_trending(
        self,
        limit: int,
        exclude_ids: Iterable[str] = (),
        kinds: Sequence[ContentKind] = ALL_KINDS,
    ) -> List[CatalogItem]:
        """Highest view counts first, merged across the requested kinds."""
        if limit <= 0:
            return []
        excluded = _object_ids(exclude_ids)
        items: List[CatalogItem] = []
        for kind in kinds:
            cursor = (
                self._collection(kind)
                .find({"is_published": True, "_id": {"$nin": excluded}})
                .sort("views", DESCENDING)
                .limit(limit)
            )
            items.extend([CatalogItem.from_document(doc, kind) async for doc in cursor])
        items.sort(key=lambda item: (-item.views, item.id))
        return items[:limit]

    async def find_latest(self, kind: ContentKind, limit: int) -> List[CatalogItem]:
        cursor = (
            self._collection(kind)
            .find({"is_published": True})
            .sort("created_at", DESCENDING)
            .limit(limit)
        )
        return [CatalogItem.from_document(doc, kind) async for doc in cursor]

    async def increment_views(self, kind: ContentKind, content_id: str) -> Optional[CatalogItem]:
        """Atomic $inc so concurrent readers never lose a view."""
        if not is_object_id(content_id):
            return None
        doc = await self._collection(kind).find_one_and_update(
            {"_id": ObjectId(content_id), "is_published": True},
            {"$inc": {"views": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return CatalogItem.from_document(doc, kind) if doc else None

    async def delete(self, kind: ContentKind, content_id: str) -> bool:
        if not is_object_id(content_id):
            return False
        result = await self._collection(kind).delete_one({"_id": ObjectId(content_id)})
        return result.deleted_count > 0
