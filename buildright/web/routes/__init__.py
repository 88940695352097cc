"""BuildRight API route modules.

Each module exports a ``router`` (APIRouter instance) that
buildright.web.app includes. Shared request models live in
buildright.web.models and the auth dependency in buildright.web.auth.

Usage:
    from buildright.web.routes import building_codes
    app.include_router(building_codes.router)
"""

from buildright.web.routes import building_codes, chats, embeddings, health, uploads

__all__ = [
    "building_codes",
    "chats",
    "embeddings",
    "health",
    "uploads",
]
