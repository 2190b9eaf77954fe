"""
Admin API key verification

Mutation and revalidation endpoints are gated behind a shared secret sent
in the ``x-api-key`` header. Verification sits behind the
CredentialVerifier protocol so the shared-secret check can be swapped for
another scheme without touching the routes.
"""

import hmac
import logging
from functools import lru_cache
from typing import Optional, Protocol

from fastapi import Depends, HTTPException, Request

from ..core.config import Settings, get_settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"

# Built-in key of earlier deployments, only honoured when explicitly allowed
DEFAULT_API_KEY = "your-secret-api-key-here"


class CredentialVerifier(Protocol):
    def is_authorized(self, credential: Optional[str]) -> bool:
        ...


class SharedSecretVerifier:
    """Exact match against one configured secret"""

    def __init__(self, secret: Optional[str]):
        self._secret = secret

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def is_authorized(self, credential: Optional[str]) -> bool:
        if not self._secret or credential is None:
            return False
        return hmac.compare_digest(credential.encode(), self._secret.encode())


def resolve_api_key(settings: Settings) -> Optional[str]:
    """Pick the admin secret from settings, or None to fail closed"""
    if settings.admin_api_key:
        return settings.admin_api_key

    if settings.allow_default_api_key:
        logger.warning("ADMIN_API_KEY not set - accepting the built-in default key")
        return DEFAULT_API_KEY

    logger.warning("ADMIN_API_KEY not set - admin endpoints will reject all requests")
    return None


@lru_cache()
def get_verifier() -> CredentialVerifier:
    """Create the credential verifier from settings"""
    return SharedSecretVerifier(resolve_api_key(get_settings()))


class APIKeyDependency:
    """
    FastAPI dependency that rejects requests without a valid API key.

    Returns the presented key so handlers can forward it.
    """

    def __init__(self, header_name: str = API_KEY_HEADER):
        self.header_name = header_name

    async def __call__(
        self,
        request: Request,
        verifier: CredentialVerifier = Depends(get_verifier),
    ) -> str:
        credential = request.headers.get(self.header_name)

        if not verifier.is_authorized(credential):
            logger.warning(f"Rejected {request.method} {request.url.path}: invalid API key")
            raise HTTPException(
                status_code=401,
                detail="Unauthorized - Invalid API key",
            )

        return credential


require_api_key = APIKeyDependency()
