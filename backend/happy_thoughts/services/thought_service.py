"""
Happy Thoughts API — Thought Service (Business Logic)
======================================================

What:  The three operations of the service: list, create and like.
How:   Each method receives the request's AsyncSession, builds one SQL
       statement, and converts the result into response schemas.
Who:   Called by route handlers in routes/thoughts.py.

Listing has two paths:
    - Recency feed (no `page`): newest 20 thoughts.
    - Offset pagination (`page` + `perPage`): ORDER BY created_at DESC
      OFFSET (page - 1) * perPage LIMIT perPage, with page <= 10000 and
      perPage <= 100 so the offset always fits the store's integer type.

Store failures (SQLAlchemy or socket errors) are wrapped in
StoreUnavailableError; the original error is logged, never returned.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.exceptions import (
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from happy_thoughts.models.thought import (
    MESSAGE_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    Thought,
)
from happy_thoughts.schemas.thought import ThoughtResponse

logger = logging.getLogger(__name__)

RECENT_FEED_SIZE = 20
MAX_PER_PAGE = 100
MAX_PAGE = 10_000

# Errors raised by the driver when the store is unreachable or misbehaving.
# asyncio.TimeoutError is only an OSError subclass from Python 3.11 on.
STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class ThoughtService:
    """
    Business logic layer for thought operations.

    Responsibilities:
        - list_thoughts(): recency feed or offset page, newest first
        - create_thought(): trim, validate and persist a new thought
        - like_thought(): atomic hearts + 1, returns a confirmation string
    """

    def __init__(self, feed_size: int = RECENT_FEED_SIZE):
        self.feed_size = feed_size

    async def list_thoughts(
        self,
        db: AsyncSession,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> List[ThoughtResponse]:
        """
        List thoughts ordered by created_at descending.

        Args:
            db: Async store session
            page: 1-based page number; when None the recency feed is returned
                  and `per_page` is ignored
            per_page: Page size, required whenever `page` is given

        Raises:
            ValidationError: `page` without `per_page`, or a value out of range
            StoreUnavailableError: Query execution failed
        """
        query = select(Thought).order_by(desc(Thought.created_at))

        if page is not None:
            if per_page is None:
                raise ValidationError(
                    message="perPage is required when page is given",
                    field="perPage",
                )
            if not (1 <= page <= MAX_PAGE and 1 <= per_page <= MAX_PER_PAGE):
                raise ValidationError(
                    message=(
                        f"page must be between 1 and {MAX_PAGE} and perPage "
                        f"between 1 and {MAX_PER_PAGE}"
                    ),
                    context={"page": page, "perPage": per_page},
                )
            query = query.offset((page - 1) * per_page).limit(per_page)
        else:
            query = query.limit(self.feed_size)

        try:
            result = await db.execute(query)
            thoughts = list(result.scalars().all())
        except STORE_ERRORS as e:
            logger.error("Store error listing thoughts: %s", str(e), exc_info=True)
            raise StoreUnavailableError(context={"error_type": type(e).__name__})

        logger.debug("Listed %d thoughts (page=%s, per_page=%s)", len(thoughts), page, per_page)
        return [self._to_response(thought) for thought in thoughts]

    async def create_thought(self, db: AsyncSession, message: Optional[str]) -> ThoughtResponse:
        """
        Persist a new thought with hearts = 0 and created_at = now (UTC).

        The message is stored trimmed; the length rule applies to the
        trimmed value.

        Raises:
            ValidationError: Missing message or trimmed length outside 5..140
            StoreUnavailableError: Insert failed
        """
        if not isinstance(message, str):
            raise ValidationError(message="Message is required", field="message")

        trimmed = message.strip()
        if not MESSAGE_MIN_LENGTH <= len(trimmed) <= MESSAGE_MAX_LENGTH:
            raise ValidationError(
                message=(
                    f"Message must be between {MESSAGE_MIN_LENGTH} and "
                    f"{MESSAGE_MAX_LENGTH} characters, got {len(trimmed)}"
                ),
                field="message",
                context={"length": len(trimmed)},
            )

        thought = Thought(
            message=trimmed,
            hearts=0,
            created_at=datetime.now(timezone.utc),
        )
        try:
            db.add(thought)
            await db.commit()
        except STORE_ERRORS as e:
            logger.error("Store error creating thought: %s", str(e), exc_info=True)
            raise StoreUnavailableError(context={"error_type": type(e).__name__})

        logger.info("Thought created: %s", thought.id)
        return self._to_response(thought)

    async def like_thought(self, db: AsyncSession, thought_id: str) -> str:
        """
        Increment the hearts of one thought by exactly one.

        The increment is a single UPDATE ... RETURNING statement, so
        concurrent likes on the same thought are serialized by the store.
        The returned confirmation reports the count after the increment.

        Raises:
            InvalidInputError: `thought_id` is not a UUID
            NotFoundError: No thought with that id
            StoreUnavailableError: Update failed
        """
        try:
            parsed_id = uuid.UUID(str(thought_id))
        except ValueError:
            raise InvalidInputError(
                message=f"'{thought_id}' is not a valid thought id",
                field="id",
                value=str(thought_id),
            )

        statement = (
            update(Thought)
            .where(Thought.id == parsed_id)
            .values(hearts=Thought.hearts + 1)
            .returning(Thought.hearts)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(statement)
            hearts = result.scalar_one_or_none()
            if hearts is not None:
                await db.commit()
        except STORE_ERRORS as e:
            logger.error("Store error liking thought %s: %s", parsed_id, str(e), exc_info=True)
            raise StoreUnavailableError(context={"thought_id": str(parsed_id)})

        if hearts is None:
            raise NotFoundError(resource="thought", resource_id=str(parsed_id))

        logger.info("Thought %s liked (hearts=%d)", parsed_id, hearts)
        noun = "heart" if hearts == 1 else "hearts"
        return f"Thought {parsed_id} now has {hearts} {noun}"

    @staticmethod
    def _to_response(thought: Thought) -> ThoughtResponse:
        # SQLite hands back naive datetimes; every stored value is UTC
        created_at = thought.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return ThoughtResponse(
            id=thought.id,
            message=thought.message,
            hearts=thought.hearts,
            created_at=created_at,
        )


thought_service = ThoughtService()
