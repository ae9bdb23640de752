"""Locate the generated text inside a provider's response body.

OpenAI-compatible providers (OpenRouter, OpenAI and local servers) are
tried against several paths in order, since local servers do not all
agree on the chat-completion shape::

    choices[0].message.content -> choices[0].text -> text

Anthropic responses carry the text in ``content[0].text``.

Anything that is not JSON, or has no non-empty string at any of the
known paths, raises :class:`~aicmd.errors.ExtractionFailed` with the raw
body attached.  Parse exceptions never escape this module.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Optional, Union

from .errors import ExtractionFailed, truncate_body
from .profiles import JsonPath, ProviderKind, get_profile

logger = logging.getLogger(__name__)

_MISSING = object()


def resolve_path(data: Any, path: JsonPath) -> Any:
    """Follow ``path`` through nested dicts/lists, or return a sentinel.

    A missing key, an out-of-range index or a step into the wrong kind of
    container all count as absent.
    """
    node = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or not -len(node) <= step < len(node):
                return _MISSING
            node = node[step]
        else:
            if not isinstance(node, dict) or step not in node:
                return _MISSING
            node = node[step]
    return node


def first_text(data: Any, paths: Iterable[JsonPath]) -> Optional[str]:
    """Return the first non-empty string found at any of ``paths``."""
    for path in paths:
        value = resolve_path(data, path)
        if isinstance(value, str) and value:
            return value
    return None


def extract(body: Optional[str], provider_tag: Union[str, ProviderKind]) -> str:
    """Extract the model's raw text output from ``body``.

    :param body: Raw response text.
    :param provider_tag: ``openrouter``, ``openai``, ``anthropic`` or
      ``local`` (or the matching :class:`ProviderKind`).
    :returns: The generated text, untouched.
    :raises UnknownProvider: For an unsupported tag.
    :raises ExtractionFailed: When the body is empty, not JSON, or has
      no text at any known path.
    """
    profile = get_profile(provider_tag)
    tag = profile.kind.value
    if not body or not body.strip():
        raise ExtractionFailed("Empty response body received", body=body or "", provider=tag)
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as exc:
        logger.debug("Response from %s is not JSON: %s", tag, exc)
        raise ExtractionFailed(
            f"Response is not valid JSON: {truncate_body(body)}", body=body, provider=tag
        ) from None

    text = first_text(data, profile.response_paths)
    if text is None:
        raise ExtractionFailed(
            f"Could not extract command text from response: {truncate_body(body)}",
            body=body,
            provider=tag,
        )
    return text
