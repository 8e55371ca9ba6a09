"""
HTTP client for the Messe API.

Mirrors the endpoints one method per call and returns the decoded JSON. A
single requests.Session keeps the login cookie between calls.
"""

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:5000/api"


class ApiError(Exception):
    """Non-2xx answer or transport failure."""

    def __init__(self, message: str, status: int | None = None, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details


class ApiClient:
    """
    Messe API client.

    Args:
        base_url: API root, e.g. "http://localhost:5000/api"
        timeout: timeout for ordinary calls, in seconds
        login_timeout: timeout for login and health checks
        session: optional requests.Session (tests mount adapters on it)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        login_timeout: float = 5.0,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.login_timeout = login_timeout
        self.session = session or requests.Session()

    def _send(self, method: str, path: str, json_data: Any = None, timeout: float | None = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.request(method, url, json=json_data, timeout=timeout or self.timeout)
        except requests.Timeout as e:
            logger.error("api.timeout", extra={"url": url})
            raise ApiError("Servidor demorou a responder", code="TIMEOUT") from e
        except requests.RequestException as e:
            logger.error("api.connection_error", extra={"url": url, "error": str(e)})
            raise ApiError("Não foi possível conectar ao servidor", code="CONNECTION") from e

    def _request(self, method: str, path: str, json_data: Any = None, timeout: float | None = None) -> Any:
        response = self._send(method, path, json_data, timeout)
        if response.status_code >= 400:
            raise self._error(response)
        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error(response: requests.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("error") or f"Erro servidor: {response.status_code}"
        return ApiError(message, status=response.status_code, code=body.get("code"), details=body.get("data"))

    # ------------------------- sessão -------------------------
    def health(self) -> bool:
        return self._request("GET", "/health", timeout=self.login_timeout).get("status") == "ok"

    def login(self, email: str, password: str | None = None) -> dict | None:
        """Returns the user record, or None for bad credentials."""
        response = self._send("POST", "/login", {"email": email, "password": password}, self.login_timeout)
        if response.status_code == 401:
            return None
        if response.status_code >= 400:
            raise self._error(response)
        return response.json()

    def logout(self) -> None:
        self._request("POST", "/logout")

    # ------------------------- stock -------------------------
    def get_stats(self) -> dict:
        return self._request("GET", "/stats")

    def get_stock(self) -> list[dict]:
        return self._request("GET", "/stock")

    def create_stock_item(self, item: dict) -> dict:
        return self._request("POST", "/stock", item)

    def get_sectors(self) -> list[dict]:
        return self._request("GET", "/sectors")

    # ------------------------- movimentos -------------------------
    def get_item_movements(self, item_id: int) -> list[dict]:
        return self._request("GET", f"/movements/item/{item_id}")

    def get_all_movements(self) -> list[dict]:
        return self._request("GET", "/movements")

    def create_movement(self, data: dict) -> dict:
        return self._request("POST", "/movements", data)

    # ------------------------- requisições -------------------------
    def get_requisitions(self) -> list[dict]:
        return self._request("GET", "/requisitions")

    def create_requisition(self, data: dict) -> dict:
        return self._request("POST", "/requisitions", data)

    # ------------------------- utilizadores -------------------------
    def get_users(self) -> list[dict]:
        return self._request("GET", "/users")

    def create_user(self, user: dict) -> dict:
        return self._request("POST", "/users", user)

    def update_user(self, user: dict) -> dict:
        return self._request("PUT", "/users", user)

    def delete_user(self, user_id: int) -> None:
        self._request("DELETE", f"/users/{user_id}")
