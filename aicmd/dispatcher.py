"""Compose the provider pipeline for a single call.

Each call runs the same sequence of stages::

    Validate -> BuildRequest -> Send -> Extract -> Sanitize -> Present

and stops at the first failing stage.  Failures surface as a
:class:`~aicmd.errors.ProviderError` tagged with the provider name, and
nothing is presented for a failed call.  A :class:`Dispatcher` keeps no
per-call state, so one instance can serve any number of calls.

The module-level functions :func:`openrouter`, :func:`openai`,
:func:`anthropic` and :func:`local` are the public entry points.
"""

from __future__ import annotations

import functools
import logging
from typing import Callable, Optional, Union

import click

from .clipboard import Clipboard, detect_clipboard
from .config import Settings, load_settings
from .errors import ProviderError
from .presenter import present
from .profiles import ProviderKind
from .providers import get_provider
from .sanitizer import sanitize
from .transport import Transport, select_transport

logger = logging.getLogger(__name__)

_DETECT = object()

NO_CLIPBOARD_NOTE = "Clipboard unavailable: no pbcopy, wl-copy, xclip or clip.exe found"


class Dispatcher:
    """Runs prompts through a provider with shared read-only collaborators.

    :param settings: Immutable configuration loaded at startup.
    :param transport: HTTP backend; selected from ``settings.http_client``
      on first use when omitted.
    :param clipboard: Clipboard to copy results to.  Detected from the
      environment when omitted; pass ``None`` to disable.
    :param echo: Output function, ``click.echo`` by default.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None,
        clipboard: Union[Clipboard, None, object] = _DETECT,
        echo: Callable[..., None] = click.echo,
    ) -> None:
        self.settings = settings or Settings()
        self._transport = transport
        self.clipboard_note: Optional[str] = None
        if clipboard is _DETECT:
            clipboard = detect_clipboard(self.settings.enable_clipboard)
            if clipboard is None and self.settings.enable_clipboard:
                self.clipboard_note = NO_CLIPBOARD_NOTE
        self.clipboard = clipboard
        self.echo = echo

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = select_transport(self.settings.http_client, self.settings.timeout)
        return self._transport

    def generate(self, provider: Union[str, ProviderKind], prompt: str) -> str:
        """Return the sanitised command for ``prompt`` without presenting it.

        :raises ProviderError: From whichever stage failed, tagged with the
          provider name.
        """
        kind = ProviderKind.parse(provider)
        adapter = get_provider(kind, self.settings)
        try:
            request = adapter.build_request(prompt)
            self.echo(f"Requesting command from {adapter.describe()}...", err=True)
            response = self.transport.send(request)
            text = adapter.extract_text(response.text)
            return sanitize(text)
        except ProviderError as exc:
            if exc.provider is None:
                exc.provider = kind.value
            logger.debug("%s call failed: %s", kind.value, exc.__class__.__name__)
            raise

    def run(self, provider: Union[str, ProviderKind], prompt: str) -> str:
        """Generate a command and present it; returns the command."""
        command = self.generate(provider, prompt)
        present(
            command,
            clipboard=self.clipboard,
            echo=self.echo,
            unavailable_note=self.clipboard_note,
        )
        return command


@functools.lru_cache(maxsize=None)
def default_dispatcher() -> Dispatcher:
    """Dispatcher over settings loaded once per process."""
    return Dispatcher(load_settings())


def _dispatch(kind: ProviderKind, prompt: str, dispatcher: Optional[Dispatcher]) -> str:
    if dispatcher is None:
        dispatcher = default_dispatcher()
    return dispatcher.run(kind, prompt)


def openrouter(prompt: str, dispatcher: Optional[Dispatcher] = None) -> str:
    """Print a command for ``prompt`` generated via OpenRouter."""
    return _dispatch(ProviderKind.OPENROUTER, prompt, dispatcher)


def openai(prompt: str, dispatcher: Optional[Dispatcher] = None) -> str:
    """Print a command for ``prompt`` generated via OpenAI."""
    return _dispatch(ProviderKind.OPENAI, prompt, dispatcher)


def anthropic(prompt: str, dispatcher: Optional[Dispatcher] = None) -> str:
    """Print a command for ``prompt`` generated via Anthropic."""
    return _dispatch(ProviderKind.ANTHROPIC, prompt, dispatcher)


def local(prompt: str, dispatcher: Optional[Dispatcher] = None) -> str:
    """Print a command for ``prompt`` generated by a local model server."""
    return _dispatch(ProviderKind.LOCAL, prompt, dispatcher)
