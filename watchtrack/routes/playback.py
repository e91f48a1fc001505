from fastapi import APIRouter, Depends, Request, status

from ..core.auth import CurrentAccount, get_current_account
from ..core.config import settings
from ..dependencies import get_playback_tracker
from ..middleware.rate_limit import limiter
from ..models.playback import PlaybackStart, PlaybackUpdate
from ..services.playback_tracker import PlaybackTracker
from . import success

router = APIRouter(prefix="/playback", tags=["playback"])


@router.post("/start", status_code=status.HTTP_201_CREATED)
async def start_playback(
    payload: PlaybackStart,
    current: CurrentAccount = Depends(get_current_account),
    tracker: PlaybackTracker = Depends(get_playback_tracker),
):
    """Open a new playback session for one viewing attempt."""
    session = await tracker.start(current.account_id, payload)
    return success({"sessionId": session.session_id})


@router.get("/{session_id}")
async def get_playback(
    session_id: str,
    current: CurrentAccount = Depends(get_current_account),
    tracker: PlaybackTracker = Depends(get_playback_tracker),
):
    session = await tracker.get(current.account_id, session_id)
    return success({"session": session})


@router.patch("/{session_id}")
@limiter.limit(settings.API_RATE_LIMIT)
async def update_playback(
    request: Request,
    session_id: str,
    changes: PlaybackUpdate,
    current: CurrentAccount = Depends(get_current_account),
    tracker: PlaybackTracker = Depends(get_playback_tracker),
):
    """Apply sparse player telemetry to a session."""
    await tracker.update(current.account_id, session_id, changes)
    return success()


@router.post("/{session_id}/complete")
async def complete_playback(
    session_id: str,
    current: CurrentAccount = Depends(get_current_account),
    tracker: PlaybackTracker = Depends(get_playback_tracker),
):
    await tracker.complete(current.account_id, session_id)
    return success()
