"""Dependency injection for FastAPI endpoints"""

from typing import List

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from household_ledger.config import settings
from household_ledger.domain.models import Identity
from household_ledger.infrastructure.clients.identity import IdentityClient
from household_ledger.infrastructure.database.repositories import SessionRepository
from household_ledger.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_identity_client() -> IdentityClient:
    """Provide identity provider client instance"""
    return IdentityClient()


def get_allowed_emails() -> List[str]:
    """Provide the sign-in allow-list"""
    return settings.allowed_emails


def get_session_token(authorization: str | None = Header(None)) -> str:
    """Extract the bearer token from the Authorization header"""
    if not authorization:
        raise HTTPException(status_code=401, detail="Not signed in")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return token.strip()


def get_current_identity(
    token: str = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> Identity:
    """Resolve the signed-in identity or reject the request"""
    identity = SessionRepository(db).get_identity(token)
    if identity is None:
        raise HTTPException(status_code=401, detail="Session expired or unknown")
    return identity
