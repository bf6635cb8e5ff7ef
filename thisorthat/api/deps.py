"""
Dependency injection for API endpoints.
"""
from typing import Generator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from thisorthat.core.auth import AuthUser, HostedAuthProvider, build_auth_provider, extract_bearer_token
from thisorthat.core.database import SessionLocal
from thisorthat.core.exceptions import AuthRequired
from thisorthat.services.repository import GameRepository


def get_db() -> Generator:
    """
    Database dependency that ensures proper session cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> GameRepository:
    return GameRepository(db)


def get_auth_provider() -> HostedAuthProvider:
    return build_auth_provider()


def get_current_user(
        authorization: Optional[str] = Header(None),
        provider: HostedAuthProvider = Depends(get_auth_provider)
) -> AuthUser:
    """
    Resolve the caller from `Authorization: Bearer <token>`.

    Raises AuthRequired (401) when the header is missing or the provider
    rejects the token.
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthRequired("Authentication required")
    return provider.get_user(token)
