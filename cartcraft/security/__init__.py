# Security modules

from .api_key import (
    API_KEY_HEADER,
    APIKeyDependency,
    CredentialVerifier,
    SharedSecretVerifier,
    get_verifier,
    require_api_key,
)

__all__ = [
    "API_KEY_HEADER",
    "APIKeyDependency",
    "CredentialVerifier",
    "SharedSecretVerifier",
    "get_verifier",
    "require_api_key",
]
