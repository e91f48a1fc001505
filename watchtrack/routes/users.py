from fastapi import APIRouter, Depends, Request, status

from ..core.auth import CurrentAccount, get_current_account
from ..core.config import settings
from ..dependencies import get_profile_service, get_progress_service
from ..middleware.rate_limit import limiter
from ..models.profile import MyListRequest, ProfileCreate, ProfileUpdate, ProgressReport
from ..services.profiles import ProfileService
from ..services.progress import ProgressService
from . import success

router = APIRouter(prefix="/users", tags=["users"])


# Profile management

@router.post("/profiles", status_code=status.HTTP_201_CREATED)
async def create_profile(
    payload: ProfileCreate,
    current: CurrentAccount = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    profile = await profiles.create_profile(current.account_id, payload)
    return success({"profile": profile}, message="Profile created")


@router.get("/profiles")
async def list_profiles(
    current: CurrentAccount = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    return success({"profiles": await profiles.list_profiles(current.account_id)})


@router.put("/profiles/{profile_id}")
async def update_profile(
    profile_id: str,
    payload: ProfileUpdate,
    current: CurrentAccount = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    profile = await profiles.update_profile(current.account_id, profile_id, payload)
    return success({"profile": profile}, message="Profile updated")


@router.delete("/profiles/{profile_id}")
async def delete_profile(
    profile_id: str,
    current: CurrentAccount = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    await profiles.delete_profile(current.account_id, profile_id)
    return success(message="Profile deleted")


# My List

@router.post("/my-list/add", status_code=status.HTTP_201_CREATED)
async def add_to_my_list(
    payload: MyListRequest,
    current: CurrentAccount = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    entry = await profiles.add_to_my_list(current.account_id, payload)
    return success(entry, message="Added to My List")


@router.post("/my-list/remove")
async def remove_from_my_list(
    payload: MyListRequest,
    current: CurrentAccount = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    await profiles.remove_from_my_list(current.account_id, payload.profile_id, payload.content_id)
    return success({"contentId": payload.content_id}, message="Removed from My List")


@router.get("/my-list/{profile_id}")
async def get_my_list(
    profile_id: str,
    current: CurrentAccount = Depends(get_current_account),
    profiles: ProfileService = Depends(get_profile_service),
):
    items = await profiles.get_my_list(current.account_id, profile_id)
    return success({"myList": items, "totalCount": len(items)})


# Watch progress

@router.post("/progress/update")
@limiter.limit(settings.API_RATE_LIMIT)
async def update_progress(
    request: Request,
    report: ProgressReport,
    current: CurrentAccount = Depends(get_current_account),
    progress: ProgressService = Depends(get_progress_service),
):
    """Record how far a profile got into a title (or episode)."""
    await progress.report_progress(current.account_id, report)
    return success(message="Progress updated")


@router.get("/watch-history/{profile_id}")
async def get_watch_history(
    profile_id: str,
    current: CurrentAccount = Depends(get_current_account),
    progress: ProgressService = Depends(get_progress_service),
):
    history = await progress.get_watch_history(current.account_id, profile_id)
    return success({"watchHistory": history})
