"""Identity provider HTTP client for verifying Google ID tokens"""

import httpx
from household_ledger.domain.models import Identity
from household_ledger.domain.exceptions import IdentityProviderError
from household_ledger.config import settings
from household_ledger.infrastructure.observability.metrics import identity_latency_histogram


class IdentityClient:
    """Client for the identity provider's token verification endpoint"""

    def __init__(
        self,
        tokeninfo_url: str | None = None,
        audience: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.tokeninfo_url = tokeninfo_url or settings.identity_tokeninfo_url
        self.audience = audience if audience is not None else settings.identity_audience
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def authenticate(self, id_token: str) -> Identity:
        """
        Verify an ID token and return the identity it carries.

        Raises:
            IdentityProviderError: On timeout, rejected token, wrong audience,
                unverified email or malformed response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with identity_latency_histogram.time():
                    response = await client.get(self.tokeninfo_url, params={"id_token": id_token})
                response.raise_for_status()
                claims = response.json()

                if self.audience and claims.get("aud") != self.audience:
                    raise IdentityProviderError("Token was issued for a different client")
                # tokeninfo returns the flag as a string
                if str(claims.get("email_verified", "false")).lower() != "true":
                    raise IdentityProviderError("Email address is not verified")

                return Identity(
                    uid=claims["sub"],
                    email=claims["email"],
                    display_name=claims.get("name") or settings.default_display_name,
                    photo_url=claims.get("picture"),
                )

            except httpx.TimeoutException as e:
                raise IdentityProviderError(f"Identity provider timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise IdentityProviderError(f"Identity provider rejected token: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise IdentityProviderError(f"Identity provider unreachable: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                raise IdentityProviderError(f"Invalid identity response: {e}") from e
