"""
Token service for judge bearer tokens.

Handles:
- JWT issuance for a judge (subject = judge GUID)
- Token validation and actor context creation

Design:
- Tokens are HS256 JWTs signed with EODSA_JWT_SECRET_KEY
- The judge is reloaded on validation so is_admin is never taken from
  the token itself
"""

from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from sqlalchemy.orm import Session

from backend.src.models import Judge
from backend.src.middleware.auth import ActorContext
from backend.src.services.lookup import find_by_guid, get_by_guid
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


TOKEN_ALGORITHM = "HS256"
TOKEN_TYPE = "judge"
DEFAULT_TOKEN_EXPIRY_HOURS = 12


class TokenService:
    """
    Service for issuing and validating judge tokens.

    Usage:
        >>> service = TokenService(db_session, jwt_secret)
        >>> token = service.issue_token("jdg_01hgw...")
        >>> ctx = service.validate_token(token)
        >>> ctx.is_admin
        False
    """

    def __init__(self, db: Session, jwt_secret: str):
        """
        Initialize token service.

        Args:
            db: SQLAlchemy database session
            jwt_secret: Secret key for JWT signing
        """
        self.db = db
        self.jwt_secret = jwt_secret

    def issue_token(
        self,
        judge_guid: str,
        expires_in_hours: int = DEFAULT_TOKEN_EXPIRY_HOURS,
    ) -> str:
        """
        Issue a token for a judge.

        Raises:
            NotFoundError: If the judge does not exist
        """
        judge = get_by_guid(self.db, Judge, judge_guid)

        now = datetime.utcnow()
        payload = {
            "sub": judge.guid,
            "exp": now + timedelta(hours=expires_in_hours),
            "iat": now,
            "type": TOKEN_TYPE,
        }
        token = jwt.encode(payload, self.jwt_secret, algorithm=TOKEN_ALGORITHM)

        logger.info(f"Issued token for judge {judge.guid}")
        return token

    def validate_token(self, token: str) -> Optional[ActorContext]:
        """
        Validate a token and build the actor context.

        Returns:
            ActorContext if valid, None if invalid, expired or for an unknown judge
        """
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[TOKEN_ALGORITHM],
            )
        except JWTError as e:
            logger.warning(f"Token validation failed: JWT error - {e}")
            return None

        if payload.get("type") != TOKEN_TYPE:
            logger.warning("Token validation failed: not a judge token")
            return None

        judge = find_by_guid(self.db, Judge, payload.get("sub") or "")
        if judge is None:
            logger.warning("Token validation failed: judge not found")
            return None

        return ActorContext(
            judge_id=judge.id,
            judge_guid=judge.guid,
            judge_email=judge.email,
            is_admin=judge.is_admin,
        )
