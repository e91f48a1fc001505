"""
Playback session tracking.

A session records one viewing attempt: Started -> (Updated)* -> Completed.
Sessions are never reused; a re-watch or a second device starts a new one.
Updates after completion are still applied (late telemetry from the player)
but never clear the completed flag. Sessions do not touch watch history;
clients persist resume state through the progress endpoint.
"""

import logging
import uuid
from typing import Optional

from ..core.config import settings
from ..core.errors import AuthorizationError, NotFoundError
from ..core.monitoring import PLAYBACK_EVENTS
from ..models.base import utcnow
from ..models.playback import PlaybackError, PlaybackSession, PlaybackStart, PlaybackUpdate
from ..repositories.accounts import AccountRepository
from ..repositories.playback import PlaybackRepository
from .profiles import load_account, require_object_id, resolve_profile

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return str(uuid.uuid4())


class PlaybackTracker:
    def __init__(
        self,
        sessions: PlaybackRepository,
        accounts: AccountRepository,
        error_history_limit: int = settings.PLAYBACK_ERROR_HISTORY_LIMIT,
        default_cdn: str = settings.DEFAULT_CDN,
    ):
        self.sessions = sessions
        self.accounts = accounts
        self.error_history_limit = error_history_limit
        self.default_cdn = default_cdn

    async def start(self, account_id: str, payload: PlaybackStart) -> PlaybackSession:
        require_object_id(payload.profile_id, "profileId")
        require_object_id(payload.title_id, "titleId")
        if payload.episode_id is not None:
            require_object_id(payload.episode_id, "episodeId")
        await resolve_profile(self.accounts, account_id, payload.profile_id)

        now = utcnow()
        session = PlaybackSession(
            session_id=generate_session_id(),
            profile_id=payload.profile_id,
            title_id=payload.title_id,
            episode_id=payload.episode_id,
            device_id=payload.device_id,
            started_at=now,
            duration_ms=payload.duration_ms,
            last_position_ms=payload.resume_at,
            resume_at=payload.resume_at,
            current_cdn=payload.current_cdn or self.default_cdn,
            current_bitrate=payload.current_bitrate,
            playback_token=payload.playback_token,
            manifest_url=payload.manifest_url,
            license_url=payload.license_url,
            created_at=now,
            updated_at=now,
        )
        await self.sessions.insert(session)
        PLAYBACK_EVENTS.labels(event="start").inc()
        logger.info(f"Started playback session {session.session_id} for profile {payload.profile_id}")
        return session

    async def get(self, account_id: str, session_id: str) -> PlaybackSession:
        return await self._owned_session(account_id, session_id)

    async def update(self, account_id: str, session_id: str, changes: PlaybackUpdate) -> PlaybackSession:
        session = await self._owned_session(account_id, session_id)

        fields = {
            name: value
            for name, value in changes.model_dump(exclude_unset=True, exclude={"playback_error"}).items()
            if value is not None
        }
        fields["updated_at"] = utcnow()

        error: Optional[PlaybackError] = None
        report = changes.playback_error
        if report is not None and report.is_complete:
            error = PlaybackError(code=report.code, message=report.message)

        if session.is_completed:
            logger.info(f"Telemetry received for completed session {session_id}")

        updated = await self.sessions.apply_update(
            session_id, fields, error=error, error_limit=self.error_history_limit
        )
        if not updated:
            raise NotFoundError("Playback session", session_id)

        PLAYBACK_EVENTS.labels(event="update").inc()
        if error is not None:
            PLAYBACK_EVENTS.labels(event="error").inc()
            logger.warning(f"Playback error {error.code} on session {session_id}: {error.message}")
        return updated

    async def complete(self, account_id: str, session_id: str) -> PlaybackSession:
        await self._owned_session(account_id, session_id)

        completed = await self.sessions.mark_completed(session_id, utcnow())
        if not completed:
            raise NotFoundError("Playback session", session_id)

        PLAYBACK_EVENTS.labels(event="complete").inc()
        logger.info(f"Completed playback session {session_id}")
        return completed

    async def _owned_session(self, account_id: str, session_id: str) -> PlaybackSession:
        session = await self.sessions.get(session_id)
        if not session:
            raise NotFoundError("Playback session", session_id)

        account = await load_account(self.accounts, account_id)
        if session.profile_id not in account.profile_ids:
            raise AuthorizationError("Playback session belongs to another profile")
        return session
