"""Post service — listing, lookup and owner-only mutation of posts."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.auth.dependencies import ensure_owner
from ephemeris.config import settings
from ephemeris.db.models import Post, User
from ephemeris.db.paginate import Direction, Page, paginate
from ephemeris.errors import NotFoundError
from ephemeris.schemas.post import PostWrite

logger = structlog.get_logger()


class PostService:
    """Business logic for posts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_posts(
        self,
        offset: int = 0,
        limit: int | None = None,
        author: str | None = None,
        column: str = "id",
        direction: Direction = Direction.DESC,
    ) -> Page[Post]:
        query = select(Post)
        if author is not None:
            query = query.where(Post.author == author.lower())

        return await (
            paginate(query, offset)
            .with_limit(settings.default_page_limit if limit is None else limit)
            .with_column(column)
            .with_direction(direction)
            .execute(self.db)
        )

    async def get(self, post_id: int) -> Post:
        post = await self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found.")
        return post

    async def create(self, author: User, data: PostWrite) -> Post:
        post = Post(
            author=author.username,
            title=data.title,
            subtitle=data.subtitle,
            body=data.body,
        )
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)

        logger.info("post.created", author=author.username, title=post.title, post_id=post.id)
        return post

    async def edit(self, user: User, post_id: int, data: PostWrite) -> Post:
        post = await self.get(post_id)
        ensure_owner(user, post, "edit", "post")

        post.title = data.title
        post.subtitle = data.subtitle
        post.body = data.body
        await self.db.commit()
        await self.db.refresh(post)
        return post

    async def delete(self, user: User, post_id: int) -> Post:
        post = await self.get(post_id)
        ensure_owner(user, post, "delete", "post")

        await self.db.delete(post)
        await self.db.commit()

        logger.info("post.deleted", author=user.username, post_id=post_id)
        return post
