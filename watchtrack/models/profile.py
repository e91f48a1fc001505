import enum
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, field_validator

from .base import CamelModel, stringify_ids, utcnow
from .content import ContentKind


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class SubscriptionPlan(str, enum.Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class Subscription(CamelModel):
    plan: SubscriptionPlan = SubscriptionPlan.FREE
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    expires_at: Optional[datetime] = None


class WatchHistoryEntry(CamelModel):
    content_id: str
    content_type: ContentKind
    episode_id: Optional[str] = None
    progress: float = Field(0, ge=0, description="Seconds watched")
    duration: float = Field(0, ge=0, description="Total length in seconds")
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def key(self) -> Tuple[str, Optional[str]]:
        return (self.content_id, self.episode_id)


class MyListEntry(CamelModel):
    content_id: str
    content_type: ContentKind
    added_at: datetime = Field(default_factory=utcnow)


class Profile(CamelModel):
    id: str
    name: str
    avatar: str = ""
    is_kids: bool = False
    watch_history: List[WatchHistoryEntry] = Field(default_factory=list)
    my_list: List[MyListEntry] = Field(default_factory=list)

    def find_history(self, content_id: str, episode_id: Optional[str]) -> Optional[int]:
        """Index of the entry for (content_id, episode_id); an unset episode only matches an unset episode."""
        for index, entry in enumerate(self.watch_history):
            if entry.content_id == content_id and entry.episode_id == episode_id:
                return index
        return None

    def in_my_list(self, content_id: str) -> bool:
        return any(entry.content_id == content_id for entry in self.my_list)


class Account(CamelModel):
    id: str
    email: str = ""
    role: UserRole = UserRole.USER
    subscription: Subscription = Field(default_factory=Subscription)
    is_blocked: bool = False
    profiles: List[Profile] = Field(default_factory=list)

    @property
    def is_premium(self) -> bool:
        return (
            self.subscription.plan == SubscriptionPlan.PREMIUM
            and self.subscription.status == SubscriptionStatus.ACTIVE
        )

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None

    @property
    def profile_ids(self) -> List[str]:
        return [profile.id for profile in self.profiles]

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Account":
        data = stringify_ids(dict(doc))
        data["id"] = data.pop("_id")
        profiles = []
        for profile in data.get("profiles", []):
            profile = dict(profile)
            profile["id"] = profile.pop("_id")
            profiles.append(profile)
        data["profiles"] = profiles
        return cls.model_validate(data)


# Request bodies

class ProgressReport(CamelModel):
    profile_id: str
    content_id: str
    content_type: ContentKind
    episode_id: Optional[str] = None
    progress: float = Field(..., ge=0)
    duration: float = Field(..., ge=0)


class ProfileCreate(CamelModel):
    name: str = Field(..., max_length=50)
    avatar: Optional[str] = None
    is_kids: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Profile name required")
        return v


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=50)
    avatar: Optional[str] = None


class MyListRequest(CamelModel):
    profile_id: str
    content_id: str
    content_type: ContentKind = ContentKind.MOVIE
