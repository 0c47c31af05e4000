"""
Unit tests for InteractionService.

Repositories and the database session are AsyncMock objects, which lets the
tests force storage failures at each step of the write path.
"""

from __future__ import annotations

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.models.user_preference import UserPreference
from app.repositories.preference_repository import default_profile_values
from app.schemas.interaction import TrackInteractionRequest
from app.services.interaction_service import InteractionService


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def _make_profile(user_id: uuid.UUID | None = None, **overrides) -> UserPreference:
    profile = UserPreference(user_id=user_id or uuid.uuid4(), **default_profile_values())
    profile.id = uuid.uuid4()
    for field, value in overrides.items():
        setattr(profile, field, value)
    return profile


def _make_service(
    profile: UserPreference | None = None,
    upsert_error: Exception | None = None,
    fetch_error: Exception | None = None,
    create_error: Exception | None = None,
    save_error: Exception | None = None,
) -> tuple[InteractionService, MagicMock, MagicMock]:
    interaction_repo = MagicMock()
    interaction_repo.upsert = AsyncMock(side_effect=upsert_error)
    interaction_repo.list_for_user = AsyncMock(return_value=([], 0))

    preference_repo = MagicMock()
    preference_repo.get_by_user = AsyncMock(return_value=profile, side_effect=fetch_error)
    preference_repo.create_default = AsyncMock(
        side_effect=create_error or (lambda db, uid: _make_profile(user_id=uid))
    )
    preference_repo.save = AsyncMock(side_effect=save_error)

    service = InteractionService(interaction_repo=interaction_repo, preference_repo=preference_repo)
    return service, interaction_repo, preference_repo


def _event(**kwargs) -> TrackInteractionRequest:
    kwargs.setdefault("content_id", "c1")
    return TrackInteractionRequest(**kwargs)


# ---------------------------------------------------------------------------
# record_interaction: interaction row
# ---------------------------------------------------------------------------
class TestRecordInteraction:
    @pytest.mark.asyncio
    async def test_returns_summary(self):
        service, _, _ = _make_service(profile=_make_profile())
        db = AsyncMock()

        summary = await service.record_interaction(
            db, uuid.uuid4(), _event(watch_duration=9, total_duration=10, attention_score=90)
        )

        assert summary.content_id == "c1"
        assert summary.watch_completion_rate == pytest.approx(90.0)
        assert summary.attention_score == 90

    @pytest.mark.asyncio
    async def test_upsert_receives_resolved_flags(self):
        service, interaction_repo, _ = _make_service(profile=_make_profile())
        user_id = uuid.uuid4()

        await service.record_interaction(
            AsyncMock(), user_id, _event(action="share", liked=True, tags=["a"], category="music")
        )

        _, args, _ = interaction_repo.upsert.mock_calls[0]
        assert args[1] == user_id
        assert args[2] == "c1"
        values = args[3]
        assert values["liked"] is True
        assert values["shared"] is True
        assert values["tags"] == ["a"]
        assert values["category"] == "music"
        assert values["watch_completion_rate"] == 0.0

    @pytest.mark.asyncio
    async def test_unlike_clears_stored_flag(self):
        service, interaction_repo, _ = _make_service(profile=_make_profile())

        await service.record_interaction(AsyncMock(), uuid.uuid4(), _event(action="unlike", liked=True))

        values = interaction_repo.upsert.mock_calls[0].args[3]
        assert values["liked"] is False

    @pytest.mark.asyncio
    async def test_interaction_write_failure_is_500(self):
        service, _, preference_repo = _make_service(
            profile=_make_profile(), upsert_error=OperationalError("insert", {}, Exception("db down"))
        )
        db = AsyncMock()

        with pytest.raises(HTTPException) as exc_info:
            await service.record_interaction(db, uuid.uuid4(), _event())

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Failed to record interaction"
        db.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_interaction_write_failure_skips_preferences(self):
        service, _, preference_repo = _make_service(
            profile=_make_profile(), upsert_error=SQLAlchemyError("boom")
        )

        with pytest.raises(HTTPException):
            await service.record_interaction(AsyncMock(), uuid.uuid4(), _event())

        preference_repo.get_by_user.assert_not_awaited()
        preference_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_is_500(self):
        service, _, preference_repo = _make_service(profile=_make_profile())
        db = AsyncMock()
        db.commit = AsyncMock(side_effect=SQLAlchemyError("commit failed"))

        with pytest.raises(HTTPException) as exc_info:
            await service.record_interaction(db, uuid.uuid4(), _event())

        assert exc_info.value.status_code == 500
        preference_repo.get_by_user.assert_not_awaited()


# ---------------------------------------------------------------------------
# record_interaction: preference maintenance
# ---------------------------------------------------------------------------
class TestPreferenceMaintenance:
    @pytest.mark.asyncio
    async def test_existing_profile_is_updated(self):
        profile = _make_profile(total_content_views=3, avg_watch_time=10.0, engagement_score=60.0)
        service, _, preference_repo = _make_service(profile=profile)

        await service.record_interaction(AsyncMock(), profile.user_id, _event(watch_duration=30, liked=True))

        preference_repo.create_default.assert_not_awaited()
        saved_profile, values = preference_repo.save.mock_calls[0].args[1:3]
        assert saved_profile is profile
        assert values["total_content_views"] == 4
        assert values["avg_watch_time"] == pytest.approx(15.0)
        assert values["engagement_score"] == 62
        assert values["last_seen_content"] == ["c1"]

    @pytest.mark.asyncio
    async def test_missing_profile_is_created_then_updated(self):
        service, _, preference_repo = _make_service(profile=None)
        user_id = uuid.uuid4()

        await service.record_interaction(
            AsyncMock(), user_id, _event(watch_duration=9, total_duration=10, attention_score=90, liked=True)
        )

        preference_repo.create_default.assert_awaited_once()
        assert preference_repo.create_default.mock_calls[0].args[1] == user_id
        values = preference_repo.save.mock_calls[0].args[2]
        assert values["total_content_views"] == 1
        assert values["avg_watch_time"] == pytest.approx(9.0)
        assert values["focus_score"] == pytest.approx(9.0)
        assert values["engagement_score"] == 53

    @pytest.mark.asyncio
    async def test_both_writes_are_committed(self):
        service, _, _ = _make_service(profile=_make_profile())
        db = AsyncMock()

        await service.record_interaction(db, uuid.uuid4(), _event())

        assert db.commit.await_count == 2
        db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_failure_still_succeeds(self):
        service, _, preference_repo = _make_service(fetch_error=SQLAlchemyError("read failed"))
        db = AsyncMock()

        summary = await service.record_interaction(db, uuid.uuid4(), _event())

        assert summary.content_id == "c1"
        preference_repo.create_default.assert_not_awaited()
        preference_repo.save.assert_not_awaited()
        db.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_create_failure_still_succeeds(self):
        service, _, preference_repo = _make_service(
            profile=None, create_error=SQLAlchemyError("insert failed")
        )
        db = AsyncMock()

        summary = await service.record_interaction(db, uuid.uuid4(), _event())

        assert summary.content_id == "c1"
        preference_repo.save.assert_not_awaited()
        db.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_save_failure_still_succeeds(self):
        service, _, _ = _make_service(profile=_make_profile(), save_error=SQLAlchemyError("update failed"))
        db = AsyncMock()

        summary = await service.record_interaction(db, uuid.uuid4(), _event())

        assert summary.content_id == "c1"
        db.rollback.assert_awaited()
        # Only the interaction commit went through
        assert db.commit.await_count == 1

    @pytest.mark.asyncio
    async def test_unexpected_error_still_succeeds(self):
        service, _, _ = _make_service(fetch_error=RuntimeError("unexpected"))
        db = AsyncMock()

        summary = await service.record_interaction(db, uuid.uuid4(), _event())

        assert summary.content_id == "c1"
        db.rollback.assert_awaited()

    @pytest.mark.asyncio
    async def test_lock_is_released_after_update(self, mock_redis):
        profile = _make_profile()
        service, _, _ = _make_service(profile=profile)

        await service.record_interaction(AsyncMock(), profile.user_id, _event())

        assert await mock_redis.get(f"pref-lock:{profile.user_id}") is None


# ---------------------------------------------------------------------------
# get_preferences / list_interactions
# ---------------------------------------------------------------------------
class TestReads:
    @pytest.mark.asyncio
    async def test_get_preferences_defaults_without_profile(self):
        service, _, preference_repo = _make_service(profile=None)
        user_id = uuid.uuid4()

        prefs = await service.get_preferences(AsyncMock(), user_id)

        assert prefs.user_id == user_id
        assert prefs.total_content_views == 0
        assert prefs.engagement_score == 50
        assert prefs.last_seen_content == []
        preference_repo.create_default.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_preferences_returns_stored_profile(self):
        profile = _make_profile(total_content_views=7, liked_tags=["jazz"])
        service, _, _ = _make_service(profile=profile)

        prefs = await service.get_preferences(AsyncMock(), profile.user_id)

        assert prefs.total_content_views == 7
        assert prefs.liked_tags == ["jazz"]

    @pytest.mark.asyncio
    async def test_get_preferences_failure_is_500(self):
        service, _, _ = _make_service(fetch_error=SQLAlchemyError("read failed"))

        with pytest.raises(HTTPException) as exc_info:
            await service.get_preferences(AsyncMock(), uuid.uuid4())

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_list_interactions_pages(self):
        service, interaction_repo, _ = _make_service()
        row = SimpleNamespace(
            id=uuid.uuid4(),
            content_id="c1",
            content_type="video",
            watch_duration=5.0,
            total_duration=10.0,
            watch_completion_rate=50.0,
            attention_score=0.0,
            liked=False,
            shared=False,
            skipped=True,
            tags=["x"],
            category=None,
            created_at=None,
            updated_at=None,
        )
        interaction_repo.list_for_user = AsyncMock(return_value=([row], 11))
        user_id = uuid.uuid4()

        page = await service.list_interactions(AsyncMock(), user_id, skip=10, limit=5)

        assert page.total == 11
        assert page.skip == 10
        assert page.limit == 5
        assert page.items[0].content_id == "c1"
        assert page.items[0].skipped is True
        interaction_repo.list_for_user.assert_awaited_once()
