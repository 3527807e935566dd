"""
Postboard Backend: Post Service
================================

What:  Persists new posts.
How:   Holds the AsyncSession it was constructed with; `create()` adds a Post,
       commits, and returns the stored row with its id and timestamps.
Who:   Built per request by `get_post_service` and called by the posts route.

Error Handling:
    Every persistence failure is rolled back, logged with its cause, and
    re-raised as PostCreationError. Callers cannot tell a lost connection
    from a constraint violation.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import PostCreationError
from app.models.post import Post

logger = logging.getLogger(__name__)


class PostService:
    """Business logic for posts. Stateless apart from the injected session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, title: str, body: str) -> Post:
        """
        Store a new post.

        Args:
            title: Already-validated, non-empty title
            body:  Already-validated, non-empty body

        Returns:
            The persisted Post, with id, created_at and updated_at populated.

        Raises:
            PostCreationError: the write failed for any reason.
        """
        post = Post(title=title, body=body)
        try:
            self.session.add(post)
            await self.session.flush()
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error("Could not store post: %s", str(e), exc_info=True)
            raise PostCreationError(
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Post %s created", post.id)
        return post
