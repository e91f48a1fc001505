import logging
from datetime import datetime
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ..models.playback import PlaybackError, PlaybackSession

logger = logging.getLogger(__name__)


def _session_from_document(doc: Dict[str, Any]) -> PlaybackSession:
    doc = dict(doc)
    doc.pop("_id", None)
    return PlaybackSession.model_validate(doc)


class PlaybackRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["playback_sessions"]

    async def insert(self, session: PlaybackSession) -> None:
        await self.collection.insert_one(session.model_dump())

    async def get(self, session_id: str) -> Optional[PlaybackSession]:
        doc = await self.collection.find_one({"session_id": session_id})
        return _session_from_document(doc) if doc else None

    async def apply_update(
        self,
        session_id: str,
        fields: Dict[str, Any],
        error: Optional[PlaybackError] = None,
        error_limit: int = 0,
    ) -> Optional[PlaybackSession]:
        """
        Set only the given fields, optionally appending an error. With an
        error_limit the error list keeps the most recent entries in order.
        """
        update: Dict[str, Any] = {"$set": fields}
        if error is not None:
            push: Dict[str, Any] = {"$each": [error.model_dump()]}
            if error_limit:
                push["$slice"] = -error_limit
            update["$push"] = {"playback_errors": push}
        doc = await self.collection.find_one_and_update(
            {"session_id": session_id},
            update,
            return_document=ReturnDocument.AFTER,
        )
        return _session_from_document(doc) if doc else None

    async def mark_completed(self, session_id: str, completed_at: datetime) -> Optional[PlaybackSession]:
        return await self.apply_update(
            session_id,
            {"is_completed": True, "completed_at": completed_at, "updated_at": completed_at},
        )
