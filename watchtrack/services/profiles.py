import logging
from typing import Dict, List, Optional, Tuple

from bson import ObjectId

from ..core.config import settings
from ..core.errors import ConflictError, NotFoundError, ValidationError
from ..models.base import is_object_id
from ..models.content import CatalogItem, ContentKind
from ..models.profile import (
    Account,
    MyListEntry,
    MyListRequest,
    Profile,
    ProfileCreate,
    ProfileUpdate,
)
from ..repositories.accounts import AccountRepository
from ..repositories.catalog import CatalogRepository

logger = logging.getLogger(__name__)


def require_object_id(value: Optional[str], field: str) -> str:
    if not is_object_id(value):
        raise ValidationError.for_field(field, f"{field} must be a valid id")
    return value


async def load_account(accounts: AccountRepository, account_id: str) -> Account:
    account = await accounts.get_account(account_id)
    if not account:
        raise NotFoundError("Account", account_id)
    return account


async def resolve_profile(
    accounts: AccountRepository,
    account_id: str,
    profile_id: Optional[str] = None,
) -> Tuple[Account, Profile]:
    """
    Load the caller's account and one of its profiles. Without a profile_id
    the account's first profile is used. A profile owned by another account
    is reported as missing.
    """
    account = await load_account(accounts, account_id)
    if profile_id is None:
        if not account.profiles:
            raise NotFoundError("Profile", "default")
        return account, account.profiles[0]

    require_object_id(profile_id, "profileId")
    profile = account.get_profile(profile_id)
    if not profile:
        raise NotFoundError("Profile", profile_id)
    return account, profile


async def resolve_entries(catalog: CatalogRepository, refs: List[Tuple[str, ContentKind]]) -> List[CatalogItem]:
    """Fetch published titles for (id, kind) refs, keeping ref order and dropping dangling ones."""
    ids_by_kind: Dict[ContentKind, List[str]] = {}
    for content_id, kind in refs:
        ids_by_kind.setdefault(kind, []).append(content_id)

    found: Dict[str, CatalogItem] = {}
    for kind, ids in ids_by_kind.items():
        for item in await catalog.find_by_ids(kind, ids):
            found[item.id] = item
    return [found[content_id] for content_id, _ in refs if content_id in found]


class ProfileService:
    def __init__(
        self,
        accounts: AccountRepository,
        catalog: CatalogRepository,
        max_profiles: int = settings.MAX_PROFILES_PER_ACCOUNT,
    ):
        self.accounts = accounts
        self.catalog = catalog
        self.max_profiles = max_profiles

    async def create_profile(self, account_id: str, payload: ProfileCreate) -> Profile:
        account = await load_account(self.accounts, account_id)
        if len(account.profiles) >= self.max_profiles:
            raise ValidationError.for_field("profiles", f"Maximum {self.max_profiles} profiles allowed")

        profile = Profile(
            id=str(ObjectId()),
            name=payload.name,
            avatar=payload.avatar or settings.DEFAULT_AVATAR_URL,
            is_kids=payload.is_kids,
        )
        await self.accounts.add_profile(account_id, profile)
        logger.info(f"Created profile {profile.id} for account {account_id}")
        return profile

    async def list_profiles(self, account_id: str) -> List[Profile]:
        account = await load_account(self.accounts, account_id)
        return account.profiles

    async def update_profile(self, account_id: str, profile_id: str, payload: ProfileUpdate) -> Profile:
        _, profile = await resolve_profile(self.accounts, account_id, profile_id)
        fields = {}
        if payload.name:
            fields["name"] = payload.name.strip()
        if payload.avatar:
            fields["avatar"] = payload.avatar
        await self.accounts.update_profile(account_id, profile_id, fields)
        return profile.model_copy(update=fields)

    async def delete_profile(self, account_id: str, profile_id: str) -> None:
        await resolve_profile(self.accounts, account_id, profile_id)
        await self.accounts.delete_profile(account_id, profile_id)
        logger.info(f"Deleted profile {profile_id} from account {account_id}")

    async def add_to_my_list(self, account_id: str, payload: MyListRequest) -> MyListEntry:
        require_object_id(payload.content_id, "contentId")
        content = await self.catalog.find_by_id(payload.content_type, payload.content_id)
        if not content:
            raise NotFoundError(payload.content_type.value, payload.content_id)

        _, profile = await resolve_profile(self.accounts, account_id, payload.profile_id)
        if profile.in_my_list(payload.content_id):
            raise ConflictError("Already in My List")

        entry = MyListEntry(content_id=payload.content_id, content_type=payload.content_type)
        await self.accounts.save_my_list(account_id, profile.id, profile.my_list + [entry])
        return entry

    async def remove_from_my_list(self, account_id: str, profile_id: str, content_id: str) -> None:
        require_object_id(content_id, "contentId")
        _, profile = await resolve_profile(self.accounts, account_id, profile_id)
        if not profile.in_my_list(content_id):
            raise NotFoundError("My List entry", content_id)

        remaining = [entry for entry in profile.my_list if entry.content_id != content_id]
        await self.accounts.save_my_list(account_id, profile.id, remaining)

    async def get_my_list(self, account_id: str, profile_id: str) -> List[CatalogItem]:
        _, profile = await resolve_profile(self.accounts, account_id, profile_id)
        refs = [(entry.content_id, entry.content_type) for entry in profile.my_list]
        return await resolve_entries(self.catalog, refs)
