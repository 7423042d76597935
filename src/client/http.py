from typing import Any, Mapping, Optional

import requests

from src.core.configs import settings
from src.core.exceptions import ApiError
from src.core.security import TOKEN_COOKIE_NAME
from src.utils.logging import get_logger

logger = get_logger(__name__)


def serialize_filters(filters: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Query parameters from a filter mapping; ``None`` values are dropped."""
    params: dict[str, str] = {}
    for key, value in (filters or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        else:
            params[key] = str(value)
    return params


class ApiClient:
    """
    Thin JSON client for the zoo API.

    Any session object exposing the ``requests.Session.request`` signature
    and a ``cookies`` jar can be injected; the authentication token travels
    as the ``token`` cookie on every request.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Any = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else settings.request_timeout
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self.session.cookies.set(TOKEN_COOKIE_NAME, token)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        files: Any = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        # multipart bodies set their own content type with the boundary
        headers = {} if files is not None else {"Content-Type": "application/json"}
        try:
            response = self.session.request(
                method,
                url,
                params=serialize_filters(params) or None,
                json=json,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not 200 <= response.status_code < 300:
            message = None
            if isinstance(body, dict):
                message = body.get("message")
            message = message or f"HTTP error! status: {response.status_code}"
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(message, response.status_code)

        return body

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None, files: Any = None) -> Any:
        return self.request("POST", path, json=json, files=files)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
