from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel

from flowycart.domain.config import DEFAULT_TIMEOUT

# libcurl error numbers, so transport failures carry the codes API users already know
CURLE_FAILED = 0
CURLE_COULDNT_CONNECT = 7
CURLE_OPERATION_TIMEDOUT = 28
CURLE_TOO_MANY_REDIRECTS = 47
CURLE_RECV_ERROR = 56
CURLE_BAD_CONTENT_ENCODING = 61

_ERROR_CODES: list[tuple[type[httpx.RequestError], int]] = [
    (httpx.TimeoutException, CURLE_OPERATION_TIMEDOUT),
    (httpx.ConnectError, CURLE_COULDNT_CONNECT),
    (httpx.ProtocolError, CURLE_RECV_ERROR),
    (httpx.ReadError, CURLE_RECV_ERROR),
    (httpx.DecodingError, CURLE_BAD_CONTENT_ENCODING),
    (httpx.TooManyRedirects, CURLE_TOO_MANY_REDIRECTS),
]


class TransportResult(BaseModel):
    """State of a finished POST, whatever its outcome.

    ``http_status_code`` is 0 when no response was received; ``error`` is set
    only for connectivity failures, never for 4xx/5xx responses.
    """

    http_status_code: int = 0
    response: Any = None
    raw_body: str = ""
    error: bool = False
    error_message: str = ""
    error_code: int = 0


def error_code_for(exc: httpx.RequestError) -> int:
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return CURLE_FAILED


def decode_body(response: httpx.Response) -> Any:
    """Return the JSON-decoded body, or the raw text if it is not JSON."""
    content_type = response.headers.get("Content-Type", "")
    if "json" not in content_type:
        return response.text
    try:
        return response.json()
    except ValueError:
        return response.text


class HttpTransport:
    """Single-shot JSON POST over httpx.

    Pass ``client`` to reuse a connection pool (or an ``httpx.MockTransport``);
    the adapter never closes a client it was given. Without one, a fresh
    client is opened and closed for every call.
    """

    def __init__(
        self, client: httpx.Client | None = None, timeout: float | None = DEFAULT_TIMEOUT
    ) -> None:
        self._client = client
        self._timeout = timeout

    def post(
        self, url: str, headers: Mapping[str, str], payload: Mapping[str, Any]
    ) -> TransportResult:
        try:
            if self._client is not None:
                response = self._client.post(
                    url, headers=dict(headers), json=dict(payload), timeout=self._timeout
                )
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(url, headers=dict(headers), json=dict(payload))
        except httpx.RequestError as exc:
            logger.debug(f"POST {url} failed: {type(exc).__name__}: {exc}")
            return TransportResult(
                error=True,
                error_message=str(exc) or type(exc).__name__,
                error_code=error_code_for(exc),
            )

        return TransportResult(
            http_status_code=response.status_code,
            response=decode_body(response),
            raw_body=response.text,
        )
