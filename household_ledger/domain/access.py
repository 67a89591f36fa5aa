"""Email allow-list policy applied after the identity provider authenticates a user"""

from typing import Iterable

from household_ledger.domain.exceptions import UnauthorizedIdentityError
from household_ledger.domain.models import Identity


def is_allowed(identity: Identity, allowed_emails: Iterable[str]) -> bool:
    """Case-insensitive email match; an empty allow-list admits nobody"""
    email = identity.email.strip().lower()
    return any(email == allowed.strip().lower() for allowed in allowed_emails)


def authorize(identity: Identity, allowed_emails: Iterable[str]) -> Identity:
    """Return the identity if allowed, raise UnauthorizedIdentityError otherwise"""
    if not is_allowed(identity, allowed_emails):
        raise UnauthorizedIdentityError(f"Email {identity.email} is not authorized")
    return identity
