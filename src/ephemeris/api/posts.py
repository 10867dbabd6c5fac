"""Posts API.

Reads are open. Creating requires a session; editing and deleting also
require that the caller wrote the post (403 otherwise).
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.api.params import PageOffset, RecordId, sort_direction
from ephemeris.auth.dependencies import get_current_user
from ephemeris.config import settings
from ephemeris.db.engine import get_db
from ephemeris.db.models import User
from ephemeris.db.paginate import Direction
from ephemeris.schemas.common import PageRead, page_body
from ephemeris.schemas.post import POST_SORT_COLUMNS, PostRead, PostSort, PostWrite
from ephemeris.services.post_service import PostService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)


@router.get("/posts", response_model=PageRead[PostRead])
async def list_posts(
    offset: PageOffset = 0,
    limit: Optional[int] = Query(None, ge=0, le=settings.max_page_limit),
    author: Optional[str] = Query(None),
    sort: PostSort = Query("id"),
    direction: Direction = Depends(sort_direction),
    svc: PostService = Depends(_svc),
):
    """List posts, optionally by one author."""
    page = await svc.list_posts(
        offset=offset,
        limit=limit,
        author=author,
        column=POST_SORT_COLUMNS[sort],
        direction=direction,
    )
    return page_body(page)


@router.get("/post/{post_id}", response_model=PostRead)
async def get_post(post_id: RecordId, svc: PostService = Depends(_svc)):
    return await svc.get(post_id)


@router.post("/post", response_model=PostRead, status_code=201)
async def create_post(
    body: PostWrite,
    user: User = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    return await svc.create(user, body)


@router.put("/post/{post_id}", response_model=PostRead)
async def edit_post(
    post_id: RecordId,
    body: PostWrite,
    user: User = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    return await svc.edit(user, post_id, body)


@router.delete("/post/{post_id}", status_code=204)
async def delete_post(
    post_id: RecordId,
    user: User = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    await svc.delete(user, post_id)
    return Response(status_code=204)
