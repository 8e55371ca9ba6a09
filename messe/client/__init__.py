import os

from messe.client.api import DEFAULT_BASE_URL, ApiClient, ApiError
from messe.client.mock import MockApi
from messe.client.session import AuthSession


def get_api(use_real_backend=None, base_url=None):
    """Real HTTP client, or the in-memory mock when MESSE_USE_REAL_BACKEND is false."""
    if use_real_backend is None:
        use_real_backend = os.getenv("MESSE_USE_REAL_BACKEND", "true").lower() not in ("0", "false", "no")
    if not use_real_backend:
        return MockApi()
    return ApiClient(base_url or os.getenv("MESSE_API_URL", DEFAULT_BASE_URL))


__all__ = ["ApiClient", "ApiError", "AuthSession", "MockApi", "get_api"]
