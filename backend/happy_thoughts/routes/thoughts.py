"""
Happy Thoughts API — Thought Route Handlers
=============================================

What:  GET /thoughts (list), POST /thoughts (create),
       PATCH /thoughts/{thought_id}/like (add one heart).
How:   Query parameters and bodies are validated by FastAPI against the
       declared types; the handlers delegate to ThoughtService and wrap the
       result in the `{success, response}` envelope.

Query parameter names keep the public camelCase spelling (`perPage`).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from happy_thoughts.database import get_db_session
from happy_thoughts.schemas.thought import (
    ErrorEnvelope,
    LikeEnvelope,
    ThoughtCreate,
    ThoughtEnvelope,
    ThoughtListEnvelope,
)
from happy_thoughts.services.thought_service import (
    MAX_PAGE,
    MAX_PER_PAGE,
    thought_service,
)

router = APIRouter(tags=["Thoughts"])


@router.get(
    "/thoughts",
    response_model=ThoughtListEnvelope,
    responses={
        400: {"description": "Invalid pagination parameters", "model": ErrorEnvelope},
        503: {"description": "Store unavailable", "model": ErrorEnvelope},
    },
    summary="List thoughts, newest first",
    description=(
        "Without `page`, returns the 20 most recent thoughts. With `page` and "
        "`perPage`, returns that page of thoughts ordered newest first."
    ),
)
async def list_thoughts(
    page: Optional[int] = Query(
        default=None, ge=1, le=MAX_PAGE,
        description="1-based page number. Requires perPage.",
    ),
    per_page: Optional[int] = Query(
        default=None, ge=1, le=MAX_PER_PAGE, alias="perPage",
        description="Page size. Ignored when page is omitted.",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> ThoughtListEnvelope:
    thoughts = await thought_service.list_thoughts(db=db, page=page, per_page=per_page)
    return ThoughtListEnvelope(response=thoughts)


@router.post(
    "/thoughts",
    status_code=201,
    response_model=ThoughtEnvelope,
    responses={
        400: {"description": "Message missing or outside 5..140 characters", "model": ErrorEnvelope},
        503: {"description": "Store unavailable", "model": ErrorEnvelope},
    },
    summary="Post a new thought",
)
async def create_thought(
    payload: ThoughtCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ThoughtEnvelope:
    thought = await thought_service.create_thought(db=db, message=payload.message)
    return ThoughtEnvelope(response=thought)


@router.patch(
    "/thoughts/{thought_id}/like",
    response_model=LikeEnvelope,
    responses={
        404: {"description": "Unknown or malformed thought id", "model": ErrorEnvelope},
        503: {"description": "Store unavailable", "model": ErrorEnvelope},
    },
    summary="Add one heart to a thought",
)
async def like_thought(
    thought_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> LikeEnvelope:
    # thought_id stays a str so malformed ids reach the service and get
    # the envelope instead of FastAPI's 422
    confirmation = await thought_service.like_thought(db=db, thought_id=thought_id)
    return LikeEnvelope(response=confirmation)
