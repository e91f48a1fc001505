import pytest

from watchtrack.core.errors import AuthorizationError, NotFoundError, ValidationError
from watchtrack.models.playback import PlaybackStart, PlaybackUpdate

from ..fakes import new_id


def start_payload(profile_id, **overrides):
    data = {"profileId": profile_id, "titleId": new_id(), "durationMs": 600000}
    data.update(overrides)
    return PlaybackStart.model_validate(data)


@pytest.mark.asyncio
async def test_start_initializes_session(tracker, sessions, account):
    profile_id = account.profiles[0].id
    session = await tracker.start(account.id, start_payload(profile_id, resumeAt=1500))

    stored = sessions.sessions[session.session_id]
    assert stored.profile_id == profile_id
    assert stored.last_position_ms == 1500
    assert stored.resume_at == 1500
    assert stored.is_completed is False
    assert stored.playback_errors == []
    assert stored.current_cdn == "cloudflare"
    assert stored.completed_at is None


@pytest.mark.asyncio
async def test_every_start_gets_a_fresh_session(tracker, account):
    payload = start_payload(account.profiles[0].id)
    first = await tracker.start(account.id, payload)
    second = await tracker.start(account.id, payload)

    assert first.session_id != second.session_id
    assert len(first.session_id) == 36


@pytest.mark.asyncio
async def test_start_rejects_malformed_ids(tracker, account):
    with pytest.raises(ValidationError) as exc:
        await tracker.start(account.id, start_payload("not-an-id"))
    assert exc.value.metadata["errors"][0]["field"] == "profileId"

    with pytest.raises(ValidationError):
        await tracker.start(account.id, start_payload(account.profiles[0].id, titleId="nope"))


@pytest.mark.asyncio
async def test_start_requires_own_profile(tracker, accounts, account):
    stranger = accounts.create()
    with pytest.raises(NotFoundError):
        await tracker.start(account.id, start_payload(stranger.profiles[0].id))


@pytest.mark.asyncio
async def test_update_is_partial(tracker, sessions, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id, currentBitrate=3000))

    await tracker.update(account.id, session.session_id, PlaybackUpdate(last_position_ms=42000))

    stored = sessions.sessions[session.session_id]
    assert stored.last_position_ms == 42000
    assert stored.current_bitrate == 3000
    assert stored.duration_ms == 600000


@pytest.mark.asyncio
async def test_update_ignores_explicit_nulls(tracker, sessions, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id))
    changes = PlaybackUpdate.model_validate({"currentCdn": None, "currentBitrate": 800})

    await tracker.update(account.id, session.session_id, changes)

    stored = sessions.sessions[session.session_id]
    assert stored.current_cdn == "cloudflare"
    assert stored.current_bitrate == 800


@pytest.mark.asyncio
async def test_errors_append_in_order_and_keep_most_recent(tracker, sessions, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id))

    for i in range(5):
        changes = PlaybackUpdate.model_validate({"playbackError": {"code": f"E{i}", "message": "stall"}})
        await tracker.update(account.id, session.session_id, changes)

    codes = [e.code for e in sessions.sessions[session.session_id].playback_errors]
    assert codes == ["E2", "E3", "E4"]


@pytest.mark.asyncio
async def test_numeric_error_code_is_recorded_with_the_telemetry(tracker, sessions, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id))
    changes = PlaybackUpdate.model_validate(
        {"lastPositionMs": 300000, "playbackError": {"code": 3, "message": "MEDIA_ERR_DECODE"}}
    )

    await tracker.update(account.id, session.session_id, changes)

    stored = sessions.sessions[session.session_id]
    assert stored.last_position_ms == 300000
    assert [(e.code, e.message) for e in stored.playback_errors] == [("3", "MEDIA_ERR_DECODE")]


@pytest.mark.asyncio
async def test_incomplete_error_report_is_ignored(tracker, sessions, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id))
    changes = PlaybackUpdate.model_validate({"playbackError": {"code": "E1"}})

    await tracker.update(account.id, session.session_id, changes)

    assert sessions.sessions[session.session_id].playback_errors == []


@pytest.mark.asyncio
async def test_unknown_session(tracker, account):
    with pytest.raises(NotFoundError):
        await tracker.update(account.id, "missing", PlaybackUpdate(last_position_ms=1))
    with pytest.raises(NotFoundError):
        await tracker.complete(account.id, "missing")


@pytest.mark.asyncio
async def test_other_accounts_cannot_touch_session(tracker, accounts, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id))
    stranger = accounts.create()

    with pytest.raises(AuthorizationError):
        await tracker.update(stranger.id, session.session_id, PlaybackUpdate(last_position_ms=1))
    with pytest.raises(AuthorizationError):
        await tracker.complete(stranger.id, session.session_id)


@pytest.mark.asyncio
async def test_start_update_complete_scenario(tracker, sessions, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id, durationMs=600000))
    await tracker.update(account.id, session.session_id, PlaybackUpdate(last_position_ms=300000))
    await tracker.complete(account.id, session.session_id)

    stored = sessions.sessions[session.session_id]
    assert stored.last_position_ms == 300000
    assert stored.is_completed is True
    assert stored.completed_at is not None


@pytest.mark.asyncio
async def test_completed_stays_completed(tracker, account):
    session = await tracker.start(account.id, start_payload(account.profiles[0].id))
    await tracker.complete(account.id, session.session_id)

    # Late telemetry is accepted but never reopens the session
    updated = await tracker.update(account.id, session.session_id, PlaybackUpdate(last_position_ms=10))
    assert updated.is_completed is True
    assert updated.last_position_ms == 10

    again = await tracker.complete(account.id, session.session_id)
    assert again.is_completed is True
    assert (await tracker.get(account.id, session.session_id)).is_completed is True
