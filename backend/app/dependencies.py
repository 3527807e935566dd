"""
Postboard Backend: Route Dependencies
======================================

What:  FastAPI dependencies shared by route handlers.

    validated_body(schema)  parse the request body (JSON or urlencoded form)
                            and run it through a validation schema before the
                            handler is entered
    get_post_service        a PostService bound to this request's DB session
"""

import json
import logging
from typing import Any, Awaitable, Callable, Type

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import MalformedBodyError
from app.services.post_service import PostService
from app.validation import ModelT, validate

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def parse_request_body(request: Request) -> Any:
    """
    Decode the request body according to its Content-Type.

    - application/json (and +json types): decoded JSON value
    - application/x-www-form-urlencoded: dict of the submitted fields
    - empty body or any other type: empty dict, so validation reports
      every required field as missing

    Raises:
        MalformedBodyError: the body is declared JSON but is not valid JSON.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type == FORM_CONTENT_TYPE:
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return {}

    if content_type == "application/json" or content_type.endswith("+json"):
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.debug("Rejecting malformed JSON body: %s", exc)
            raise MalformedBodyError() from exc

    return {}


def validated_body(schema: Type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """
    Build a dependency that yields the request body validated against ``schema``.

    Usage:
        async def create(payload: PostCreate = Depends(validated_body(PostCreate))):
            ...

    A failing body raises RequestValidationFailed, so the handler never runs.
    """

    async def dependency(request: Request) -> ModelT:
        data = await parse_request_body(request)
        return validate(schema, data)

    return dependency


async def get_post_service(db: AsyncSession = Depends(get_db_session)) -> PostService:
    return PostService(db)
