"""Error taxonomy for the command generation pipeline.

Every stage of the pipeline (request building, transport, extraction,
sanitisation) fails by raising a subclass of :class:`ProviderError`.
The dispatcher tags the error with the provider it was running for so
that the CLI can print a single diagnostic line such as
``Error (openai): OPENAI_API_KEY is not set``.

:class:`ClipboardUnavailable` is the only error that never terminates a
call; the presenter turns it into an informational note.
"""

from __future__ import annotations

from typing import Optional

# Maximum response text length to include in error messages
MAX_ERROR_BODY_LENGTH = 500


def truncate_body(body: Optional[str]) -> str:
    """Shorten a response body for inclusion in diagnostics."""
    if not body:
        return ""
    if len(body) > MAX_ERROR_BODY_LENGTH:
        return body[:MAX_ERROR_BODY_LENGTH] + "..."
    return body


class ProviderError(Exception):
    """Raised when a provider fails to generate a command."""

    def __init__(self, message: str, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider


class InvalidInput(ProviderError):
    """The natural language prompt was empty."""


class MissingCredential(ProviderError):
    """An API key or local endpoint required by the provider is absent."""


class UnknownProvider(ProviderError):
    """The provider tag does not name a supported provider."""


class TransportError(ProviderError):
    """The HTTP request failed or returned a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
        provider: Optional[str] = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.body = body


class ExtractionFailed(ProviderError):
    """No generated text could be located in the response body."""

    def __init__(self, message: str, body: str = "", provider: Optional[str] = None) -> None:
        super().__init__(message, provider=provider)
        self.body = body


class SanitizationError(ProviderError):
    """The extracted text could not be turned into a command."""


class EmptyResult(SanitizationError):
    """Nothing was left after removing code fences and whitespace."""


class ClipboardUnavailable(ProviderError):
    """No clipboard mechanism could accept the command (informational)."""


class ConfigError(Exception):
    """Raised for invalid configuration such as an unknown HTTP backend."""
