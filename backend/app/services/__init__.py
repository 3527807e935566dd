# Services package init
"""
Postboard Backend: Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services receive their database session at construction and are
       injected into routes through FastAPI dependencies.

Service Inventory:
    - PostService: creates posts
"""
