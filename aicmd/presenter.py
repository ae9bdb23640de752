"""Render a generated command for the user."""

from __future__ import annotations

from typing import Callable, Optional

import click

from .clipboard import Clipboard
from .errors import ClipboardUnavailable

HEADER = "--- Generated Command ---"
RULE = "-------------------------"


def present(
    command: str,
    clipboard: Optional[Clipboard] = None,
    echo: Callable[..., None] = click.echo,
    unavailable_note: Optional[str] = None,
) -> bool:
    """Print ``command`` and try to copy it to the clipboard.

    Clipboard failures are reported as a note on stderr and never change
    the outcome of the call.  ``unavailable_note`` is printed the same
    way when no clipboard was found even though one was wanted.

    :returns: ``True`` if the command reached the clipboard.
    """
    echo(HEADER)
    echo(command)
    echo(RULE)
    if clipboard is None:
        if unavailable_note:
            echo(f"({unavailable_note})", err=True)
        return False
    try:
        clipboard.copy(command)
    except ClipboardUnavailable as exc:
        echo(f"({exc})", err=True)
        return False
    echo("(Command copied to clipboard)", err=True)
    return True
