"""Model provider layer for aicmd.

This module contains the adapters that turn a free-form natural
language prompt into a provider-specific HTTP request and know where
that provider puts the generated text in its response.  All providers
implement the :class:`BaseProvider` interface:

* ``build_request(prompt)`` validates the prompt and credentials and
  returns a :class:`~aicmd.transport.ProviderRequest`.  It performs no
  I/O.
* ``extract_text(body)`` delegates to :mod:`aicmd.normalizer` with the
  provider's tag.

Supported providers:

* ``OpenRouterProvider`` – OpenRouter's OpenAI-compatible chat API.
* ``OpenAIProvider`` – OpenAI's chat completions API.
* ``AnthropicProvider`` – Anthropic's messages API.  The system
  instruction is a top-level field, authentication uses the
  ``x-api-key`` header and ``max_tokens`` is mandatory.
* ``LocalProvider`` – any locally hosted OpenAI-compatible server such
  as LM Studio, Ollama or llama.cpp.  The endpoint is derived from the
  configured base URL and the model is optional.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from . import normalizer
from .config import ProviderSettings, Settings
from .errors import InvalidInput, MissingCredential
from .profiles import (
    ANTHROPIC,
    LOCAL,
    OPENAI,
    OPENROUTER,
    ProviderKind,
    ProviderProfile,
)
from .transport import ProviderRequest

SYSTEM_PROMPT = (
    "You are an expert bash command generator. Your task is to take the user's "
    "natural language request and provide the single, most appropriate bash command "
    "that achieves the user's goal.\n"
    "The command should be directly executable in a standard bash environment "
    "(Linux, macOS, WSL).\n"
    "Output ONLY the bash command itself, without any explanation, comments, "
    "markdown formatting (like ```bash), or introductory text.\n"
    "Ensure the command is safe and avoids destructive actions unless explicitly "
    "requested and confirmed. Prioritize portable commands where possible."
)

# Anthropic takes the instruction as a single top-level string.
ANTHROPIC_SYSTEM_PROMPT = " ".join(SYSTEM_PROMPT.splitlines())

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


@dataclass(frozen=True)
class ChatPayload:
    """Provider-neutral description of one request."""

    system: str
    user: str
    model: Optional[str] = None
    max_tokens: Optional[int] = None


def local_endpoint(base_url: str) -> str:
    """Compose the chat completions URL for a local server.

    Exactly one ``/v1/chat/completions`` suffix is produced whether the
    base ends in ``/v1``, ``/v1/``, a bare host, or already carries the
    full path.
    """
    base = base_url.strip().rstrip("/")
    if base.endswith(CHAT_COMPLETIONS_SUFFIX):
        base = base[: -len(CHAT_COMPLETIONS_SUFFIX)].rstrip("/")
    if not base.endswith("/v1"):
        base = f"{base}/v1"
    return base + CHAT_COMPLETIONS_SUFFIX


class BaseProvider:
    """Abstract base class for all providers."""

    profile: ProviderProfile

    def __init__(self, settings: Optional[ProviderSettings] = None) -> None:
        self.settings = settings or ProviderSettings()

    @property
    def kind(self) -> ProviderKind:
        return self.profile.kind

    @property
    def model(self) -> Optional[str]:
        """Configured model override, else the profile default."""
        return self.settings.model or self.profile.default_model

    @property
    def endpoint(self) -> str:
        return self.profile.endpoint or ""

    def describe(self) -> str:
        """Short human label used in status lines, e.g. ``OpenAI (gpt-4o-mini)``."""
        return f"{self.profile.label} ({self.model or self.endpoint})"

    def build_request(self, prompt: str) -> ProviderRequest:
        """Return the HTTP request that asks this provider for a command.

        :raises InvalidInput: If the prompt is empty.
        :raises MissingCredential: If the provider is not configured.
        """
        payload = ChatPayload(
            system=SYSTEM_PROMPT,
            user=self._validate_prompt(prompt),
            model=self.model,
            max_tokens=self.settings.max_tokens or self.profile.default_max_tokens,
        )
        self._check_credentials()
        return ProviderRequest(
            url=self.endpoint,
            headers=self._headers(),
            body=self._body(payload),
        )

    def extract_text(self, body: str) -> str:
        """Return the raw generated text from a response body."""
        return normalizer.extract(body, self.kind)

    def _validate_prompt(self, prompt: str) -> str:
        text = (prompt or "").strip()
        if not text:
            raise InvalidInput("Empty prompt provided", provider=self.kind.value)
        return text

    def _check_credentials(self) -> None:
        if not self.settings.api_key:
            raise MissingCredential(
                f"{self.profile.key_variable} is not set", provider=self.kind.value
            )

    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.settings.api_key:
            value = self.settings.api_key
            if self.profile.bearer:
                value = f"Bearer {value}"
            headers[self.profile.auth_header] = value
        headers.update(self.profile.extra_headers)
        return headers

    def _body(self, payload: ChatPayload) -> Dict[str, Any]:
        raise NotImplementedError


class OpenAICompatibleProvider(BaseProvider):
    """Shared payload shape for chat completion style APIs."""

    def _body(self, payload: ChatPayload) -> Dict[str, Any]:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": payload.system},
            {"role": "user", "content": payload.user},
        ]
        body: Dict[str, Any] = {}
        if payload.model:
            body["model"] = payload.model
        body["messages"] = messages
        if payload.max_tokens:
            body["max_tokens"] = payload.max_tokens
        return body


class OpenRouterProvider(OpenAICompatibleProvider):
    profile = OPENROUTER


class OpenAIProvider(OpenAICompatibleProvider):
    profile = OPENAI


class LocalProvider(OpenAICompatibleProvider):
    """Provider for a locally hosted OpenAI-compatible server.

    ``base_url`` is required; the API key and model name are optional.
    When no model name is configured the ``model`` field is left out of
    the payload entirely so that the server applies its own default.
    """

    profile = LOCAL

    @property
    def endpoint(self) -> str:
        if not self.settings.base_url:
            return ""
        return local_endpoint(self.settings.base_url)

    def _check_credentials(self) -> None:
        if not self.settings.base_url:
            raise MissingCredential(
                "LOCAL_MODEL_API_BASE is not set. Set it to your local API endpoint "
                "(e.g. http://localhost:1234/v1 for LM Studio)",
                provider=self.kind.value,
            )


class AnthropicProvider(BaseProvider):
    profile = ANTHROPIC

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["Content-Type"] = "application/json"
        return headers

    def _body(self, payload: ChatPayload) -> Dict[str, Any]:
        return {
            "model": payload.model,
            "system": ANTHROPIC_SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": payload.user}],
            "max_tokens": payload.max_tokens,
        }


PROVIDERS = {
    ProviderKind.OPENROUTER: OpenRouterProvider,
    ProviderKind.OPENAI: OpenAIProvider,
    ProviderKind.ANTHROPIC: AnthropicProvider,
    ProviderKind.LOCAL: LocalProvider,
}


def get_provider(provider: Union[str, ProviderKind], settings: Optional[Settings] = None) -> BaseProvider:
    """Factory function to instantiate the appropriate provider.

    :param provider: Provider tag ('openrouter', 'openai', 'anthropic',
      'local') or :class:`ProviderKind`.
    :param settings: Loaded configuration; defaults to empty settings.
    :returns: A provider instance bound to its settings block.
    :raises UnknownProvider: If the provider name is unknown.
    """
    kind = ProviderKind.parse(provider)
    settings = settings or Settings()
    return PROVIDERS[kind](settings.for_provider(kind.value))
