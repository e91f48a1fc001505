import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..models.base import is_object_id
from ..models.profile import Account, MyListEntry, Profile, WatchHistoryEntry

logger = logging.getLogger(__name__)


def _entry_document(entry) -> Dict[str, Any]:
    doc = entry.model_dump()
    doc["content_type"] = entry.content_type.value
    return doc


class AccountRepository:
    """Accounts with their embedded profiles, watch history and my list."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["users"]

    async def get_account(self, account_id: str) -> Optional[Account]:
        if not is_object_id(account_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(account_id)})
        return Account.from_document(doc) if doc else None

    async def add_profile(self, account_id: str, profile: Profile) -> None:
        doc = profile.model_dump(exclude={"id"})
        doc["_id"] = ObjectId(profile.id)
        doc["watch_history"] = [_entry_document(e) for e in profile.watch_history]
        doc["my_list"] = [_entry_document(e) for e in profile.my_list]
        await self.collection.update_one(
            {"_id": ObjectId(account_id)},
            {"$push": {"profiles": doc}}
        )

    async def update_profile(self, account_id: str, profile_id: str, fields: Dict[str, Any]) -> bool:
        if not fields:
            return True
        result = await self.collection.update_one(
            {"_id": ObjectId(account_id), "profiles._id": ObjectId(profile_id)},
            {"$set": {f"profiles.$.{name}": value for name, value in fields.items()}}
        )
        return result.matched_count > 0

    async def delete_profile(self, account_id: str, profile_id: str) -> bool:
        result = await self.collection.update_one(
            {"_id": ObjectId(account_id)},
            {"$pull": {"profiles": {"_id": ObjectId(profile_id)}}}
        )
        return result.modified_count > 0

    async def save_watch_history(self, account_id: str, profile_id: str, entries: List[WatchHistoryEntry]) -> bool:
        return await self.update_profile(
            account_id, profile_id, {"watch_history": [_entry_document(e) for e in entries]}
        )

    async def save_my_list(self, account_id: str, profile_id: str, entries: List[MyListEntry]) -> bool:
        return await self.update_profile(
            account_id, profile_id, {"my_list": [_entry_document(e) for e in entries]}
        )

    async def find_co_watched_content(self, content_ids: Iterable[str], exclude_profile_id: str) -> Set[str]:
        """
        Content ids watched by any other profile that shares at least one
        watched title with the given set. Neighbors come from every account.
        """
        content_ids = list(content_ids)
        if not content_ids:
            return set()
        pipeline = [
            {"$match": {"profiles.watch_history.content_id": {"$in": content_ids}}},
            {"$unwind": "$profiles"},
            {"$match": {
                "profiles.watch_history.content_id": {"$in": content_ids},
                "profiles._id": {"$ne": ObjectId(exclude_profile_id)},
            }},
            {"$unwind": "$profiles.watch_history"},
            {"$group": {"_id": "$profiles.watch_history.content_id"}},
        ]
        return {doc["_id"] async for doc in self.collection.aggregate(pipeline)}

    async def purge_content(self, content_id: str) -> int:
        """Pull a deleted title out of every profile's history and my list."""
        result = await self.collection.update_many(
            {"$or": [
                {"profiles.watch_history.content_id": content_id},
                {"profiles.my_list.content_id": content_id},
            ]},
            {"$pull": {
                "profiles.$[].watch_history": {"content_id": content_id},
                "profiles.$[].my_list": {"content_id": content_id},
            }}
        )
        return result.modified_count
