# Routes package init
"""
Postboard Backend: API Routes Package
======================================

What:  HTTP route handlers, one module per resource.
How:   Each module exposes an `APIRouter` named `router`. API_ROUTERS is the
       registration list; create_app() mounts every entry under the API
       prefix (default /api).

Route Inventory:
    - posts.py:   POST /api/posts   (create a post)

Routes stay thin: extract the request data, call a service, pick the status.
"""

from typing import Tuple

from fastapi import APIRouter

from app.routes import posts

API_ROUTERS: Tuple[APIRouter, ...] = (
    posts.router,
)
