"""Users API — registration, login, sessions and preferences.

- POST /user → register (201)
- GET /user/{username} → public profile
- GET /user/{username}/posts → that user's posts, paginated
- POST /login → username/password → session token
- POST /logout → revoke the presented token (204)
- GET /session → the presented token's expiry and its user
- POST /preferences → update the caller's profile
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.api.params import PageOffset, sort_direction
from ephemeris.auth.dependencies import (
    CurrentSession,
    bearer_token,
    get_current_session,
    get_current_user,
)
from ephemeris.config import settings
from ephemeris.db.engine import get_db
from ephemeris.db.models import User
from ephemeris.db.paginate import Direction
from ephemeris.schemas.common import PageRead, page_body
from ephemeris.schemas.post import PostRead
from ephemeris.schemas.user import (
    Login,
    Registration,
    SessionRead,
    TokenRead,
    UserRead,
    UserUpdate,
)
from ephemeris.services.post_service import PostService
from ephemeris.services.user_service import UserService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("/user", response_model=UserRead, status_code=201)
async def register(body: Registration, svc: UserService = Depends(_svc)):
    """Create a new account."""
    return await svc.register(body.username, body.password)


@router.get("/user/{username}", response_model=UserRead)
async def get_user(username: str, svc: UserService = Depends(_svc)):
    return await svc.get_by_name(username)


@router.get("/user/{username}/posts", response_model=PageRead[PostRead])
async def list_user_posts(
    username: str,
    offset: PageOffset = 0,
    limit: Optional[int] = Query(None, ge=0, le=settings.max_page_limit),
    direction: Direction = Depends(sort_direction),
    db: AsyncSession = Depends(get_db),
):
    """Posts written by ``username``, newest first by default."""
    user = await UserService(db).get_by_name(username)
    page = await PostService(db).list_posts(
        offset=offset, limit=limit, author=user.username, direction=direction
    )
    return page_body(page)


@router.post("/login", response_model=TokenRead)
async def login(body: Login, svc: UserService = Depends(_svc)):
    """Exchange username and password for a session token."""
    return await svc.login(body.username, body.password)


@router.post("/logout", status_code=204)
async def logout(
    token_id: uuid.UUID = Depends(bearer_token),
    svc: UserService = Depends(_svc),
):
    """Revoke the presented token. Succeeds whether or not it was still live."""
    await svc.logout(token_id)
    return Response(status_code=204)


@router.get("/session", response_model=SessionRead)
async def get_session(session: CurrentSession = Depends(get_current_session)):
    return {"expires": session.token.expiration, "user": session.user}


@router.post("/preferences", response_model=UserRead)
async def update_preferences(
    body: UserUpdate,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(_svc),
):
    return await svc.update(user, body.about)
