"""
Middleware components for the EODSA results engine backend.

This module provides:
- ActorContext: Dataclass representing the authenticated judge
- get_actor_context: FastAPI dependency resolving the bearer token
- require_auth: FastAPI dependency for requiring authentication
- require_admin: FastAPI dependency for requiring administrator rights
"""

from backend.src.middleware.auth import (
    ActorContext,
    get_actor_context,
    require_auth,
    require_admin,
)

__all__ = [
    "ActorContext",
    "get_actor_context",
    "require_auth",
    "require_admin",
]
