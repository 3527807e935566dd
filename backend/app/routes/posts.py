"""
Postboard Backend: Posts Route Handlers
========================================

What:  POST /posts, mounted under the API prefix (POST /api/posts).
How:   The body is validated by a dependency before the handler runs; the
       handler calls PostService and wraps the result as {"post": {...}}.

Request Flow:
    1. validated_body(PostCreate) parses and checks the body → 400 on failure
    2. PostService.create(title, body) stores the post
    3. 201 Created with PostEnvelope
    4. Any service failure → HTTPError(400, "Cannot create post.")
"""

import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_post_service, validated_body
from app.exceptions import HTTPError
from app.schemas.post import ErrorResponse, PostCreate, PostEnvelope, PostResponse
from app.services.post_service import PostService

logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Cannot create post."

router = APIRouter(tags=["Posts"])


@router.post(
    "/posts",
    status_code=201,
    response_model=PostEnvelope,
    responses={
        201: {"description": "Post created", "model": PostEnvelope},
        400: {"description": "Invalid body, or the post could not be stored", "model": ErrorResponse},
    },
    summary="Create a post",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": PostCreate.model_json_schema()},
                "application/x-www-form-urlencoded": {"schema": PostCreate.model_json_schema()},
            },
        },
    },
)
async def create_post(
    payload: PostCreate = Depends(validated_body(PostCreate)),
    service: PostService = Depends(get_post_service),
) -> PostEnvelope:
    try:
        post = await service.create(payload.title, payload.body)
    except Exception as e:
        # The cause is already logged by the service; clients get one message
        logger.warning("Post creation failed: %s", type(e).__name__)
        raise HTTPError(400, CREATE_FAILED_MESSAGE) from e

    return PostEnvelope(post=PostResponse.model_validate(post))
