"""
Bearer-token HTTP client for the gym management backend.

Every domain service talks to the backend through one ``ApiClient`` per
request. The client attaches the signed-in user's token and turns error
responses into ``ApiError`` so routers can flash a readable message.
"""
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the backend answers with a non-2xx status or is unreachable"""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "title", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    elif isinstance(body, str) and body:
        return body

    return f"Request failed with status code {response.status_code}"


def _clean_params(params: Optional[dict]) -> Optional[dict]:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None and value != ""}


class ApiClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
        files: Optional[dict] = None,
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {"params": _clean_params(params)}
        if files is not None:
            kwargs["files"] = files
        elif json is not None:
            kwargs["json"] = json

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(0, "Network Error") from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise ApiError(response.status_code, message, payload)

        return response

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
        files: Optional[dict] = None,
    ) -> Any:
        response = await self._send(method, path, params=params, json=json, files=files)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: Optional[dict] = None, files: Optional[dict] = None) -> Any:
        return await self.request("POST", path, params=params, json=json, files=files)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def download(self, path: str, params: Optional[dict] = None) -> bytes:
        """Fetch a binary export (CSV or PDF) produced by the backend."""
        response = await self._send("GET", path, params=params)
        return response.content
