"""API dependencies"""

from typing import Generator, Optional

from fastapi import Header
from sqlalchemy.orm import Session

from situation_sync.core.config import settings
from situation_sync.core.db import SessionLocal
from situation_sync.core.logging import get_logger

log = get_logger("api.deps")


class TriggerUnauthorized(Exception):
    """Raised when a sync trigger carries no accepted bearer credential."""


def get_db() -> Generator[Session, None, None]:
    """Database dependency"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_trigger_auth(authorization: Optional[str] = Header(default=None)) -> None:
    """Reject the request unless it carries one of the configured secrets.

    Skipped entirely when ENV=dev.
    """
    if settings.auth_bypassed:
        return
    token = bearer_token(authorization)
    if token is None or token not in settings.accepted_tokens:
        log.warning("Rejected sync trigger: missing or unknown bearer token")
        raise TriggerUnauthorized()
