"""Python client for the restaurant review API."""

from .api import ApiError, ReviewPlatformClient
from .credentials import (
    CredentialProvider,
    FileTokenStore,
    MemoryTokenStore,
    TokenStore,
)

__all__ = [
    "ApiError",
    "ReviewPlatformClient",
    "CredentialProvider",
    "TokenStore",
    "MemoryTokenStore",
    "FileTokenStore",
]
