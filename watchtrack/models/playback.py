from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import CamelModel, utcnow


class PlaybackError(CamelModel):
    code: str
    message: str
    timestamp: datetime = Field(default_factory=utcnow)


class PlaybackErrorReport(CamelModel):
    # HTML5 players report MediaError.code as an integer
    code: Optional[str] = None
    message: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def code_as_string(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def is_complete(self) -> bool:
        return bool(self.code) and bool(self.message)


class PlaybackSession(CamelModel):
    session_id: str
    profile_id: str
    title_id: str
    episode_id: Optional[str] = None
    device_id: Optional[str] = None
    started_at: datetime = Field(default_factory=utcnow)
    last_position_ms: float = Field(0, ge=0)
    duration_ms: float = Field(..., ge=0)
    current_cdn: str = ""
    current_bitrate: float = 0
    playback_errors: List[PlaybackError] = Field(default_factory=list)
    playback_token: str = ""
    manifest_url: str = ""
    license_url: str = ""
    resume_at: float = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PlaybackStart(CamelModel):
    profile_id: str
    title_id: str
    duration_ms: float = Field(..., ge=0)
    episode_id: Optional[str] = None
    device_id: Optional[str] = None
    playback_token: str = ""
    manifest_url: str = ""
    license_url: str = ""
    current_cdn: Optional[str] = None
    current_bitrate: float = Field(0, ge=0)
    resume_at: float = Field(0, ge=0)


class PlaybackUpdate(CamelModel):
    """Sparse telemetry; only fields the client actually sent are applied."""
    last_position_ms: Optional[float] = Field(None, ge=0)
    duration_ms: Optional[float] = Field(None, ge=0)
    resume_at: Optional[float] = Field(None, ge=0)
    current_cdn: Optional[str] = None
    current_bitrate: Optional[float] = Field(None, ge=0)
    playback_error: Optional[PlaybackErrorReport] = None
