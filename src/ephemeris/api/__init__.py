"""API route aggregation.

All routers registered here get mounted in main.py under /api/v1.

Auth is applied per route rather than per router: listings and lookups
are public, every mutation takes the caller from get_current_user.
"""

from fastapi import APIRouter

from ephemeris.api.comments import router as comments_router
from ephemeris.api.health import router as health_router
from ephemeris.api.posts import router as posts_router
from ephemeris.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users", "sessions"])
api_router.include_router(posts_router, tags=["posts"])
api_router.include_router(comments_router, tags=["comments"])
