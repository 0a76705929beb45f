"""
Actor authentication dependencies for API routes.

Provides:
- ActorContext: Dataclass describing the authenticated judge
- get_actor_context: FastAPI dependency resolving the bearer token
- require_auth: Requires any authenticated judge
- require_admin: Requires a judge with administrator rights

Actors are judges. Requests carry ``Authorization: Bearer <JWT>`` issued by
TokenService; the judge row is reloaded on every request so the admin flag
always reflects stored state.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")


@dataclass
class ActorContext:
    """
    The judge on whose behalf a request runs.

    Attributes:
        judge_id: Internal judge ID for database queries
        judge_guid: Judge's external GUID (jdg_xxx)
        judge_email: Judge's email address
        is_admin: Whether the judge has administrator rights

    Usage:
        @router.post("/scores")
        async def submit_score(
            ctx: ActorContext = Depends(require_auth)
        ):
            service.submit_score(ctx, ...)
    """

    judge_id: int
    judge_guid: str
    judge_email: Optional[str] = None
    is_admin: bool = False

    def __post_init__(self):
        """Validate required fields."""
        if not self.judge_id or not self.judge_guid:
            raise ValueError("judge_id and judge_guid are required")

    def acts_as(self, judge_guid: str) -> bool:
        """True if the actor is the given judge or an administrator."""
        return self.is_admin or self.judge_guid == judge_guid


async def get_actor_context(
    request: Request,
    db: Session = Depends(get_db),
) -> ActorContext:
    """
    FastAPI dependency extracting the actor from the bearer token.

    Raises:
        HTTPException 401: If the token is missing, invalid or expired, or
            the judge no longer exists
    """
    # Import here to avoid circular imports
    from backend.src.services.token_service import TokenService
    from backend.src.config.settings import get_settings

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    settings = get_settings()
    service = TokenService(db, settings.jwt_secret_key)
    ctx = service.validate_token(auth_header[7:])

    if not ctx:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return ctx


async def require_auth(
    ctx: ActorContext = Depends(get_actor_context)
) -> ActorContext:
    """
    FastAPI dependency that requires authentication.

    get_actor_context already raises 401; this is a semantic wrapper.
    """
    return ctx


def require_admin(ctx: ActorContext = Depends(get_actor_context)) -> ActorContext:
    """
    Dependency that requires administrator rights.

    Raises:
        HTTPException 403: If the judge is not an administrator
    """
    if not ctx.is_admin:
        logger.warning(f"Judge {ctx.judge_guid} denied administrator route")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator privileges required",
        )
    return ctx


__all__ = [
    "ActorContext",
    "get_actor_context",
    "require_auth",
    "require_admin",
]
