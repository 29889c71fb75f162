"""
Happy Thoughts API — Thought Service Unit Tests
=================================================

What:  Tests for ThoughtService business logic (list, create, like).
How:   Validation and store-failure paths use a mock session; ordering,
       pagination and increments run against a real SQLite store.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from happy_thoughts.exceptions import (
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from happy_thoughts.models.thought import Thought
from happy_thoughts.services.thought_service import MAX_PAGE, MAX_PER_PAGE, ThoughtService


def _store_down():
    return OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))


async def _count(database):
    async with database.session() as session:
        result = await session.execute(select(func.count(Thought.id)))
        return result.scalar()


class TestThoughtServiceCreate:
    """Tests for create_thought validation and persistence."""

    def setup_method(self):
        self.service = ThoughtService()

    @pytest.mark.asyncio
    async def test_create_thought_success(self, db_session):
        before = datetime.now(timezone.utc)

        result = await self.service.create_thought(db_session, "Hello world")

        assert result.message == "Hello world"
        assert result.hearts == 0
        assert isinstance(result.id, uuid.UUID)
        assert before - timedelta(seconds=1) <= result.created_at <= datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_create_thought_trims_message(self, db_session):
        result = await self.service.create_thought(db_session, "   padded thought   ")
        assert result.message == "padded thought"

    @pytest.mark.asyncio
    async def test_create_thought_boundary_lengths_accepted(self, db_session):
        short = await self.service.create_thought(db_session, "abcde")
        long = await self.service.create_thought(db_session, "x" * 140)
        assert len(short.message) == 5
        assert len(long.message) == 140

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "abcd", "   abcd   ", "x" * 141, "  " + "y" * 141])
    async def test_create_thought_length_rejected(self, database, message):
        async with database.session() as session:
            with pytest.raises(ValidationError) as exc_info:
                await self.service.create_thought(session, message)

        assert exc_info.value.field == "message"
        assert await _count(database) == 0

    @pytest.mark.asyncio
    async def test_create_thought_missing_message(self, mock_db_session):
        with pytest.raises(ValidationError, match="required"):
            await self.service.create_thought(mock_db_session, None)
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_thought_store_down(self, mock_db_session):
        mock_db_session.commit = AsyncMock(side_effect=_store_down())

        with pytest.raises(StoreUnavailableError):
            await self.service.create_thought(mock_db_session, "Hello world")


class TestThoughtServiceList:
    """Tests for the recency feed and offset pagination."""

    def setup_method(self):
        self.service = ThoughtService()

    @pytest.mark.asyncio
    async def test_list_empty(self, db_session):
        assert await self.service.list_thoughts(db_session) == []

    @pytest.mark.asyncio
    async def test_recency_feed_returns_newest_twenty(self, db_session, seed_thoughts):
        ids = await seed_thoughts(25)

        result = await self.service.list_thoughts(db_session)

        assert len(result) == 20
        assert [t.id for t in result] == list(reversed(ids))[:20]
        created = [t.created_at for t in result]
        assert created == sorted(created, reverse=True)

    @pytest.mark.asyncio
    async def test_recency_feed_ignores_per_page(self, db_session, seed_thoughts):
        await seed_thoughts(25)
        result = await self.service.list_thoughts(db_session, per_page=3)
        assert len(result) == 20

    @pytest.mark.asyncio
    async def test_offset_page(self, db_session, seed_thoughts):
        ids = await seed_thoughts(12)
        newest_first = list(reversed(ids))

        result = await self.service.list_thoughts(db_session, page=2, per_page=5)

        # ranks 6..10 by descending created_at
        assert [t.id for t in result] == newest_first[5:10]

    @pytest.mark.asyncio
    async def test_offset_page_past_end_is_empty(self, db_session, seed_thoughts):
        await seed_thoughts(3)
        assert await self.service.list_thoughts(db_session, page=5, per_page=5) == []

    @pytest.mark.asyncio
    async def test_page_without_per_page_rejected(self, mock_db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.list_thoughts(mock_db_session, page=1)

        assert exc_info.value.field == "perPage"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,per_page", [(0, 5), (1, 0), (-1, 5)])
    async def test_non_positive_pagination_rejected(self, mock_db_session, page, per_page):
        with pytest.raises(ValidationError):
            await self.service.list_thoughts(mock_db_session, page=page, per_page=per_page)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "page,per_page",
        [(1, MAX_PER_PAGE + 1), (MAX_PAGE + 1, 1), (10**10, 10**10)],
    )
    async def test_out_of_range_pagination_rejected(self, mock_db_session, page, per_page):
        with pytest.raises(ValidationError):
            await self.service.list_thoughts(mock_db_session, page=page, per_page=per_page)
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_naive_created_at_reported_as_utc(self, db_session, seed_thoughts):
        await seed_thoughts(1)

        [thought] = await self.service.list_thoughts(db_session)

        assert thought.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_list_store_down(self, mock_db_session):
        mock_db_session.execute.side_effect = _store_down()

        with pytest.raises(StoreUnavailableError) as exc_info:
            await self.service.list_thoughts(mock_db_session)

        assert exc_info.value.context["error_type"] == "OperationalError"

    @pytest.mark.asyncio
    async def test_list_store_timeout(self, mock_db_session):
        mock_db_session.execute.side_effect = asyncio.TimeoutError()

        with pytest.raises(StoreUnavailableError) as exc_info:
            await self.service.list_thoughts(mock_db_session)

        assert exc_info.value.context["error_type"] == "TimeoutError"


class TestThoughtServiceLike:
    """Tests for like_thought."""

    def setup_method(self):
        self.service = ThoughtService()

    @pytest.mark.asyncio
    async def test_like_increments_by_one(self, database, seed_thoughts):
        [thought_id] = await seed_thoughts(1, hearts=4)

        async with database.session() as session:
            message = await self.service.like_thought(session, str(thought_id))

        assert message == f"Thought {thought_id} now has 5 hearts"
        async with database.session() as session:
            stored = await session.get(Thought, thought_id)
            assert stored.hearts == 5

    @pytest.mark.asyncio
    async def test_repeated_likes_are_additive(self, database, seed_thoughts):
        [thought_id] = await seed_thoughts(1)

        for _ in range(3):
            async with database.session() as session:
                await self.service.like_thought(session, str(thought_id))

        async with database.session() as session:
            stored = await session.get(Thought, thought_id)
            assert stored.hearts == 3

    @pytest.mark.asyncio
    async def test_first_like_message_is_singular(self, db_session, seed_thoughts):
        [thought_id] = await seed_thoughts(1)
        message = await self.service.like_thought(db_session, str(thought_id))
        assert message.endswith("now has 1 heart")

    @pytest.mark.asyncio
    async def test_like_unknown_id_not_found(self, database, seed_thoughts):
        [thought_id] = await seed_thoughts(1)

        async with database.session() as session:
            with pytest.raises(NotFoundError):
                await self.service.like_thought(session, str(uuid.uuid4()))

        async with database.session() as session:
            stored = await session.get(Thought, thought_id)
            assert stored.hearts == 0

    @pytest.mark.asyncio
    async def test_like_malformed_id(self, mock_db_session):
        with pytest.raises(InvalidInputError) as exc_info:
            await self.service.like_thought(mock_db_session, "not-a-uuid")

        assert exc_info.value.context["value"] == "not-a-uuid"
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_like_store_down(self, mock_db_session):
        mock_db_session.execute.side_effect = _store_down()

        with pytest.raises(StoreUnavailableError):
            await self.service.like_thought(mock_db_session, str(uuid.uuid4()))

