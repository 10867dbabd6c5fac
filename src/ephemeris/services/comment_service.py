"""Comment service — comments hang off posts and belong to their author."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ephemeris.auth.dependencies import ensure_owner
from ephemeris.config import settings
from ephemeris.db.models import Comment, Post, User
from ephemeris.db.paginate import Direction, Page, paginate
from ephemeris.errors import NotFoundError

logger = structlog.get_logger()


class CommentService:
    """Business logic for comments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_comments(
        self,
        post_id: int,
        offset: int = 0,
        limit: int | None = None,
        direction: Direction = Direction.DESC,
    ) -> Page[Comment]:
        query = select(Comment).where(Comment.post == post_id)
        return await (
            paginate(query, offset)
            .with_limit(settings.default_page_limit if limit is None else limit)
            .with_direction(direction)
            .execute(self.db)
        )

    async def get(self, comment_id: int) -> Comment:
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment not found.")
        return comment

    async def create(self, author: User, post_id: int, message: str) -> Comment:
        if await self.db.get(Post, post_id) is None:
            raise NotFoundError("Post not found.")

        comment = Comment(author=author.username, post=post_id, message=message)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(
            "comment.created",
            author=author.username,
            comment_id=comment.id,
            post_id=post_id,
        )
        return comment

    async def edit(self, user: User, comment_id: int, message: str) -> Comment:
        comment = await self.get(comment_id)
        ensure_owner(user, comment, "edit", "comment")

        comment.message = message
        await self.db.commit()
        await self.db.refresh(comment)
        return comment

    async def delete(self, user: User, comment_id: int) -> Comment:
        comment = await self.get(comment_id)
        ensure_owner(user, comment, "delete", "comment")

        await self.db.delete(comment)
        await self.db.commit()
        return comment
