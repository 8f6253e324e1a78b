"""
Async client for the PaintPro HTTP API.

Every failure surfaces as an ``ApiError`` subclass scoped to the call that
made it; nothing here retries or keeps global error state.
"""
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..logging import structlog


class ApiError(Exception):
    def __init__(self, status: int, message: str, errors: Optional[Dict[str, List[str]]] = None):
        self.status = status
        self.message = message
        self.errors = errors or {}
        super().__init__(message)


class ValidationFailed(ApiError):
    pass


class NotFound(ApiError):
    pass


class Conflict(ApiError):
    pass


class Unauthorized(ApiError):
    pass


class TransientError(ApiError):
    """Network failures and 5xx responses; the same call may succeed later."""


_STATUS_ERRORS = {
    400: ValidationFailed,
    401: Unauthorized,
    403: Unauthorized,
    404: NotFound,
    409: Conflict,
}


def error_from_response(response: httpx.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message") or body.get("detail") or response.reason_phrase or "Request failed"
    if response.status_code >= 500:
        cls = TransientError
    else:
        cls = _STATUS_ERRORS.get(response.status_code, ApiError)
    return cls(response.status_code, str(message), body.get("errors"))


class ApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` with bearer auth and error mapping."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        locale: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.locale = locale
        self._client = httpx.AsyncClient(base_url=base_url or settings.api_base_url, transport=transport)
        self.log = structlog.get_logger().bind(component="api_client")

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.locale:
            headers["Accept-Language"] = self.locale
        return headers

    async def _send(self, method: str, path: str, params: Optional[dict] = None, json: Any = None) -> httpx.Response:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._client.request(method, path, params=params or None, json=json, headers=self._headers())
        except httpx.TransportError as exc:
            self.log.warning("api_transport_error", method=method, path=path, error=str(exc))
            raise TransientError(0, str(exc) or exc.__class__.__name__) from exc
        if response.status_code >= 400:
            error = error_from_response(response)
            self.log.info("api_error", method=method, path=path, status=error.status)
            raise error
        return response

    async def request(self, method: str, path: str, params: Optional[dict] = None, json: Any = None) -> Any:
        response = await self._send(method, path, params=params, json=json)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> None:
        await self.request("DELETE", path)

    async def download(self, path: str, params: Optional[dict] = None) -> bytes:
        response = await self._send("GET", path, params=params)
        return response.content

    async def login(self, username: str, password: str) -> dict:
        body = await self.post("/api/login", json={"username": username, "password": password})
        self.token = body["accessToken"]
        return body["user"]

    async def logout(self) -> None:
        if self.token:
            await self.post("/api/logout")
        self.token = None
