# Middleware package init
"""
Postboard Backend: Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (request direction):
    Request → [Security Headers] → [CORS] → [Request ID] → [Logging] → [GZip]
            → [Unhandled Error] → Route

    Responses travel back through the same chain in reverse, so security
    headers are applied last and the logged duration includes compression.
    An unknown exception becomes a 500 at the innermost layer, so it is
    logged and gets the same headers as any other response.

Starlette runs middleware in REVERSE order of add_middleware() calls;
create_app() adds them from the innermost (Unhandled Error) outwards.
"""
