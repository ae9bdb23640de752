"""HTTP transport layer.

A transport issues exactly one POST for a :class:`ProviderRequest` and
returns a :class:`RawResponse` when the status is 2xx.  Everything else
(non-2xx status, refused connection, DNS failure, timeout) raises
:class:`~aicmd.errors.TransportError` carrying the status code, if any,
and the raw body for diagnostics.  There are no retries.

Two interchangeable backends are provided:

* :class:`HttpxTransport` built on ``httpx``.
* :class:`RequestsTransport` built on ``requests``.

:func:`select_transport` picks one once at startup, honouring the
``http_client`` setting when given and otherwise taking the first
backend that is installed.

Logging Guidelines:
- Logs method + host + path (no tokens/keys)
- On errors: status code + truncated response
"""

from __future__ import annotations

import importlib.util
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from .errors import ConfigError, TransportError, truncate_body

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# Lookup order when no backend is configured.
BACKENDS = ("httpx", "requests")


@dataclass(frozen=True)
class ProviderRequest:
    """A fully built provider call: endpoint, ordered headers and JSON body."""

    url: str
    headers: Dict[str, str]
    body: Dict[str, Any]
    method: str = "POST"


@dataclass(frozen=True)
class RawResponse:
    """Status code and undecoded text of a successful response."""

    status_code: int
    text: str = field(repr=False)


def with_json_content_type(headers: Dict[str, str]) -> Dict[str, str]:
    """Return ``headers`` with a JSON Content-Type unless one is already set."""
    merged = dict(headers)
    if not any(key.lower() == "content-type" for key in merged):
        merged["Content-Type"] = JSON_CONTENT_TYPE
    return merged


def _describe(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


def _check_status(status_code: int, text: str) -> RawResponse:
    if 200 <= status_code < 300:
        return RawResponse(status_code=status_code, text=text)
    logger.debug("HTTP %s: %s", status_code, truncate_body(text))
    raise TransportError(
        f"API request failed with HTTP status {status_code}: {truncate_body(text)}",
        status_code=status_code,
        body=text,
    )


class Transport:
    """Interface implemented by every HTTP backend."""

    name = "abstract"

    def send(self, request: ProviderRequest) -> RawResponse:
        """POST ``request`` once and return the 2xx response.

        :raises TransportError: on any transport failure or non-2xx status.
        """
        raise NotImplementedError


class HttpxTransport(Transport):
    """Transport backed by ``httpx``.

    A preconfigured ``httpx.Client`` may be injected (tests pass one
    wrapping ``httpx.MockTransport``); otherwise a short-lived client is
    opened per request.
    """

    name = "httpx"

    def __init__(self, timeout: Optional[float] = None, client: Any = None) -> None:
        self.timeout = timeout
        self._client = client

    def send(self, request: ProviderRequest) -> RawResponse:
        import httpx

        headers = with_json_content_type(request.headers)
        content = json.dumps(request.body).encode("utf-8")
        options: Dict[str, Any] = {}
        if self.timeout is not None:
            options["timeout"] = self.timeout
        logger.debug("%s %s (httpx)", request.method, _describe(request.url))
        try:
            if self._client is not None:
                response = self._client.request(
                    request.method, request.url, headers=headers, content=content, **options
                )
            else:
                with httpx.Client(**options) as client:
                    response = client.request(request.method, request.url, headers=headers, content=content)
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise TransportError(f"API request failed: {exc}", body=str(exc)) from exc
        return _check_status(response.status_code, response.text)


class RequestsTransport(Transport):
    """Transport backed by ``requests``.

    A ``requests.Session`` (or any object with a compatible ``request``
    method) may be injected; otherwise the module-level API is used.
    """

    name = "requests"

    def __init__(self, timeout: Optional[float] = None, session: Any = None) -> None:
        self.timeout = timeout
        self._session = session

    def send(self, request: ProviderRequest) -> RawResponse:
        import requests

        headers = with_json_content_type(request.headers)
        data = json.dumps(request.body).encode("utf-8")
        options: Dict[str, Any] = {}
        if self.timeout is not None:
            options["timeout"] = self.timeout
        caller = self._session if self._session is not None else requests
        logger.debug("%s %s (requests)", request.method, _describe(request.url))
        try:
            response = caller.request(request.method, request.url, headers=headers, data=data, **options)
        except (requests.RequestException, UnicodeEncodeError) as exc:
            raise TransportError(f"API request failed: {exc}", body=str(exc)) from exc
        return _check_status(response.status_code, response.text)


TRANSPORTS = {
    HttpxTransport.name: HttpxTransport,
    RequestsTransport.name: RequestsTransport,
}


def available_backends() -> list:
    """Return the names of installed HTTP backends in lookup order."""
    return [name for name in BACKENDS if importlib.util.find_spec(name) is not None]


def select_transport(preferred: Optional[str] = None, timeout: Optional[float] = None) -> Transport:
    """Instantiate the configured HTTP backend, or the first installed one.

    :param preferred: ``"httpx"``, ``"requests"`` or ``None`` for auto.
    :param timeout: Optional timeout in seconds; ``None`` keeps the
      library default.
    :raises ConfigError: If the preferred backend is unknown or not
      installed, or no backend is installed at all.
    """
    installed = available_backends()
    if preferred:
        name = preferred.strip().lower()
        if name not in TRANSPORTS:
            raise ConfigError(
                f"Unknown HTTP client '{preferred}'. Choose one of: {', '.join(BACKENDS)}"
            )
        if name not in installed:
            raise ConfigError(f"Preferred HTTP client '{name}' is not installed")
    elif installed:
        name = installed[0]
    else:
        raise ConfigError("Neither httpx nor requests is installed. Please install one.")
    logger.debug("Using %s transport", name)
    return TRANSPORTS[name](timeout=timeout)
