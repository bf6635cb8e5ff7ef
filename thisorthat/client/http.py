"""
Thin JSON client for the This or That API.

Error responses are raised as the same exceptions the server raised,
picked by the `error_code` in the response body.
"""
import logging
from typing import Any, Optional

import requests

from thisorthat.core.config import settings
from thisorthat.core.exceptions import (
    AuthRequired, BackendError, GameClosed, GameException, GameNotFound, NotGameOwner,
    PlayerNotFound, QuestionNotFound, SlugTaken, ValidationFailed
)

logger = logging.getLogger(__name__)

ERROR_CODES = {
    "VALIDATION_ERROR": ValidationFailed,
    "AUTH_REQUIRED": AuthRequired,
    "NOT_GAME_OWNER": NotGameOwner,
    "GAME_CLOSED": GameClosed,
    "SLUG_TAKEN": SlugTaken,
    "GAME_NOT_FOUND": GameNotFound,
    "PLAYER_NOT_FOUND": PlayerNotFound,
    "QUESTION_NOT_FOUND": QuestionNotFound,
    "BACKEND_ERROR": BackendError,
}

DEFAULT_TIMEOUT = 10.0

STATUS_FALLBACK = {
    400: ValidationFailed,
    401: AuthRequired,
    403: NotGameOwner,
    404: GameNotFound,
    409: SlugTaken,
}


def error_from_response(status_code: int, body: Any) -> GameException:
    body = body if isinstance(body, dict) else {}
    detail = body.get("detail") or f"Request failed with status {status_code}"
    exc_class = ERROR_CODES.get(body.get("error_code")) or STATUS_FALLBACK.get(status_code, BackendError)
    return exc_class(str(detail))


class ApiClient:
    """
    Sends JSON requests to `base_url`.

    `http` is anything with a requests-style `request(method, url, ...)`;
    by default a `requests.Session`. Without an explicit `timeout` the
    default session gets DEFAULT_TIMEOUT and a supplied `http` is sent no
    timeout at all.
    """

    def __init__(self, base_url: Optional[str] = None, http=None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.SITE_URL).rstrip("/")
        if http is None:
            http = requests.Session()
            if timeout is None:
                timeout = DEFAULT_TIMEOUT
        self.http = http
        self.timeout = timeout

    def request(self, method: str, path: str, json: Any = None, token: Optional[str] = None) -> Any:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        kwargs = {"headers": headers}
        if json is not None:
            kwargs["json"] = json
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        try:
            response = self.http.request(method, f"{self.base_url}{path}", **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BackendError("Request failed") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            raise error_from_response(response.status_code, body)
        return body

    def get(self, path: str, token: Optional[str] = None) -> Any:
        return self.request("GET", path, token=token)

    def post(self, path: str, json: Any = None, token: Optional[str] = None) -> Any:
        return self.request("POST", path, json=json, token=token)

    def patch(self, path: str, json: Any = None, token: Optional[str] = None) -> Any:
        return self.request("PATCH", path, json=json, token=token)
