"""
Postboard Backend: Post Service Unit Tests
===========================================

What:  PostService.create() against a mocked session and a real SQLite one.

What we test:
    ✅ Successful create adds, flushes and commits
    ✅ Any persistence failure rolls back and raises PostCreationError
    ✅ Stored posts get an id and matching created/updated timestamps
    ✅ Two identical creates produce two distinct posts
"""

import uuid
from datetime import timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from app.exceptions import PostCreationError
from app.models.post import Post
from app.services.post_service import PostService


class TestPostServiceCreateMocked:
    """Session interaction, with the database mocked out."""

    @pytest.mark.asyncio
    async def test_create_success(self, mock_db_session):
        service = PostService(mock_db_session)

        post = await service.create("Hello", "World")

        assert isinstance(post, Post)
        assert post.title == "Hello"
        assert post.body == "World"
        mock_db_session.add.assert_called_once_with(post)
        mock_db_session.flush.assert_awaited_once()
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "failure",
        [
            OperationalError("INSERT", {}, Exception("connection lost")),
            IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed")),
            RuntimeError("driver exploded"),
        ],
    )
    async def test_any_failure_becomes_post_creation_error(self, mock_db_session, failure):
        mock_db_session.flush.side_effect = failure
        service = PostService(mock_db_session)

        with pytest.raises(PostCreationError) as exc_info:
            await service.create("Hello", "World")

        assert exc_info.value.context["error_type"] == type(failure).__name__
        assert exc_info.value.__cause__ is failure
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("gone"))
        service = PostService(mock_db_session)

        with pytest.raises(PostCreationError):
            await service.create("Hello", "World")

        mock_db_session.rollback.assert_awaited_once()


class TestPostServiceCreatePersisted:
    """Round trips through an in-memory SQLite database."""

    @pytest.mark.asyncio
    async def test_assigns_id_and_timestamps(self, db_session):
        post = await PostService(db_session).create("Hello", "World")

        assert isinstance(post.id, uuid.UUID)
        assert post.created_at is not None
        assert post.created_at.tzinfo == timezone.utc
        assert post.created_at == post.updated_at

    @pytest.mark.asyncio
    async def test_same_input_twice_gives_two_posts(self, db_session):
        service = PostService(db_session)

        first = await service.create("Hello", "World")
        second = await service.create("Hello", "World")

        assert first.id != second.id
        count = (await db_session.execute(select(func.count(Post.id)))).scalar_one()
        assert count == 2

    @pytest.mark.asyncio
    async def test_missing_title_not_persisted(self, db_session, count_posts):
        with pytest.raises(PostCreationError):
            await PostService(db_session).create(None, "World")

        assert await count_posts() == 0
