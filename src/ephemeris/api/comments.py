"""Comments API. Same rules as posts: open reads, owner-only mutation."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.api.params import PageOffset, RecordId, RecordRef, sort_direction
from ephemeris.auth.dependencies import get_current_user
from ephemeris.config import settings
from ephemeris.db.engine import get_db
from ephemeris.db.models import User
from ephemeris.db.paginate import Direction
from ephemeris.schemas.comment import CommentCreate, CommentRead, CommentUpdate
from ephemeris.schemas.common import PageRead, page_body
from ephemeris.services.comment_service import CommentService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)


@router.get("/comments", response_model=PageRead[CommentRead])
async def list_comments(
    post: RecordRef,
    offset: PageOffset = 0,
    limit: Optional[int] = Query(None, ge=0, le=settings.max_page_limit),
    direction: Direction = Depends(sort_direction),
    svc: CommentService = Depends(_svc),
):
    """Comments on one post."""
    page = await svc.list_comments(post, offset=offset, limit=limit, direction=direction)
    return page_body(page)


@router.get("/comment/{comment_id}", response_model=CommentRead)
async def get_comment(comment_id: RecordId, svc: CommentService = Depends(_svc)):
    return await svc.get(comment_id)


@router.post("/comment", response_model=CommentRead, status_code=201)
async def create_comment(
    body: CommentCreate,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    return await svc.create(user, body.post, body.message)


@router.put("/comment/{comment_id}", response_model=CommentRead)
async def edit_comment(
    comment_id: RecordId,
    body: CommentUpdate,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    return await svc.edit(user, comment_id, body.message)


@router.delete("/comment/{comment_id}", response_model=CommentRead)
async def delete_comment(
    comment_id: RecordId,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    """Delete a comment and return what was deleted."""
    return await svc.delete(user, comment_id)
