"""Static provider profiles.

Each supported provider is a member of :class:`ProviderKind` and has
exactly one immutable :class:`ProviderProfile` describing its endpoint,
authentication header, default model and where the generated text lives
in its response JSON.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union

from .errors import UnknownProvider

# A JSON path is a sequence of object keys and list indices.
JsonPath = Tuple[Union[str, int], ...]

CHAT_COMPLETION_PATHS: Tuple[JsonPath, ...] = (
    ("choices", 0, "message", "content"),
    ("choices", 0, "text"),
    ("text",),
)
ANTHROPIC_PATHS: Tuple[JsonPath, ...] = (("content", 0, "text"),)

ANTHROPIC_VERSION = "2023-06-01"


class ProviderKind(str, enum.Enum):
    """The closed set of providers aicmd can talk to."""

    OPENROUTER = "openrouter"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    LOCAL = "local"

    @classmethod
    def parse(cls, tag: Union[str, "ProviderKind"]) -> "ProviderKind":
        """Return the member named by ``tag``.

        :raises UnknownProvider: If ``tag`` is not a supported provider.
        """
        if isinstance(tag, cls):
            return tag
        try:
            return cls(str(tag).strip().lower())
        except ValueError:
            raise UnknownProvider(
                f"Unknown provider '{tag}'. Choose one of: {', '.join(m.value for m in cls)}"
            ) from None


@dataclass(frozen=True)
class ProviderProfile:
    """Fixed per-provider wiring."""

    kind: ProviderKind
    label: str
    endpoint: Optional[str]
    default_model: Optional[str]
    key_variable: str
    auth_header: str = "Authorization"
    bearer: bool = True
    extra_headers: Dict[str, str] = field(default_factory=dict)
    response_paths: Tuple[JsonPath, ...] = CHAT_COMPLETION_PATHS
    default_max_tokens: Optional[int] = None


OPENROUTER = ProviderProfile(
    kind=ProviderKind.OPENROUTER,
    label="OpenRouter",
    endpoint="https://openrouter.ai/api/v1/chat/completions",
    default_model="openrouter/auto",
    key_variable="OPENROUTER_API_KEY",
)

OPENAI = ProviderProfile(
    kind=ProviderKind.OPENAI,
    label="OpenAI",
    endpoint="https://api.openai.com/v1/chat/completions",
    default_model="gpt-4o-mini",
    key_variable="OPENAI_API_KEY",
)

ANTHROPIC = ProviderProfile(
    kind=ProviderKind.ANTHROPIC,
    label="Anthropic",
    endpoint="https://api.anthropic.com/v1/messages",
    default_model="claude-3-haiku-20240307",
    key_variable="ANTHROPIC_API_KEY",
    auth_header="x-api-key",
    bearer=False,
    extra_headers={"anthropic-version": ANTHROPIC_VERSION},
    response_paths=ANTHROPIC_PATHS,
    default_max_tokens=512,
)

# The local endpoint is derived from LOCAL_MODEL_API_BASE at request time.
LOCAL = ProviderProfile(
    kind=ProviderKind.LOCAL,
    label="Local Model",
    endpoint=None,
    default_model=None,
    key_variable="LOCAL_MODEL_API_KEY",
)

PROFILES: Dict[ProviderKind, ProviderProfile] = {
    profile.kind: profile for profile in (OPENROUTER, OPENAI, ANTHROPIC, LOCAL)
}


def get_profile(tag: Union[str, ProviderKind]) -> ProviderProfile:
    """Return the profile for a provider tag or kind."""
    return PROFILES[ProviderKind.parse(tag)]
