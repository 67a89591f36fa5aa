"""/v1/session - sign in, current identity, sign out"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from household_ledger.api.dependencies import (
    get_allowed_emails,
    get_current_identity,
    get_identity_client,
    get_request_id,
    get_session_token,
)
from household_ledger.api.v1.schemas import IdentitySchema, SessionResponse, SignInRequest
from household_ledger.domain.access import authorize
from household_ledger.domain.exceptions import IdentityProviderError, UnauthorizedIdentityError
from household_ledger.domain.models import Identity
from household_ledger.infrastructure.clients.identity import IdentityClient
from household_ledger.infrastructure.database.repositories import SessionRepository
from household_ledger.infrastructure.database.session import get_db
from household_ledger.infrastructure.observability.logging import log_sign_in
from household_ledger.infrastructure.observability.metrics import record_sign_in

router = APIRouter()


@router.post("/session", response_model=SessionResponse)
async def sign_in(
    request_body: SignInRequest,
    request: Request,
    db: Session = Depends(get_db),
    identity_client: IdentityClient = Depends(get_identity_client),
    allowed_emails: List[str] = Depends(get_allowed_emails),
):
    """
    Sign in with an identity-provider token.

    Flow:
    1. Verify the token with the identity provider
    2. Check the email against the allow-list; refuse without a session if absent
    3. Persist a session and return its bearer token
    """
    request_id = get_request_id(request)

    try:
        identity = await identity_client.authenticate(request_body.id_token)
        authorize(identity, allowed_emails)

        token = SessionRepository(db).create_session(identity)
        db.commit()

        record_sign_in("allowed")
        log_sign_in(request_id, identity.email, "allowed")
        return SessionResponse(token=token, identity=IdentitySchema.from_domain(identity))

    except IdentityProviderError as e:
        record_sign_in("provider_error")
        logging.error(f"Identity provider error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Identity provider unavailable or token rejected")

    except UnauthorizedIdentityError as e:
        db.rollback()
        record_sign_in("denied")
        log_sign_in(request_id, identity.email, "denied")
        raise HTTPException(status_code=403, detail=str(e))


@router.get("/session", response_model=IdentitySchema)
def current_identity(identity: Identity = Depends(get_current_identity)):
    """Identity behind the bearer token"""
    return IdentitySchema.from_domain(identity)


@router.delete("/session", status_code=204)
def sign_out(
    request: Request,
    token: str = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    """Delete the session; signing out twice is not an error"""
    SessionRepository(db).delete_session(token)
    db.commit()
    logging.info("Signed out", extra={"request_id": get_request_id(request)})
    return Response(status_code=204)
