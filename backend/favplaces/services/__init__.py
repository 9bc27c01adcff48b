# Services package init
"""
Favorite Places — Services Layer
=================================

What:  Business rules between routes (HTTP) and the JSON documents (persistence).
How:   Services accept plain ids, apply the favorites rules, and return Place
       models. They are created per application and reached from routes through
       FastAPI's dependency injection (see routes/dependencies.py).

Service Inventory:
    - JsonDocument: Whole-array JSON file with atomic replace on write
    - CatalogService: Read-only place catalog
    - FavoritesService: Idempotent add/remove on the user's favorites list
"""
