"""Best-effort clipboard delivery.

The clipboard is driven through whichever platform command is
installed: ``pbcopy`` on macOS, ``wl-copy`` under Wayland, ``xclip``
under X11 and ``clip.exe`` on WSL.  Detection happens once at startup;
the absence of any mechanism is not an error, the presenter simply
skips the copy.
"""

from __future__ import annotations

import logging
import os
import subprocess
from shutil import which
from typing import Callable, List, Mapping, Optional

from .errors import ClipboardUnavailable

logger = logging.getLogger(__name__)


class Clipboard:
    """A clipboard command that reads the text to copy from stdin."""

    def __init__(self, argv: List[str]) -> None:
        self.argv = list(argv)

    @property
    def name(self) -> str:
        return " ".join(self.argv)

    def copy(self, text: str) -> None:
        """Copy ``text`` to the clipboard.

        :raises ClipboardUnavailable: If the command fails to run or exits
          non-zero.
        """
        try:
            subprocess.run(self.argv, input=text, text=True, check=True, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise ClipboardUnavailable(f"Failed to copy command to clipboard using '{self.name}': {exc}")

    def __repr__(self) -> str:
        return f"Clipboard({self.argv!r})"


def detect_clipboard(
    enabled: bool = True,
    environ: Optional[Mapping[str, str]] = None,
    finder: Callable[[str], Optional[str]] = which,
) -> Optional[Clipboard]:
    """Return the first usable clipboard command, or ``None``.

    :param enabled: When ``False`` no detection is done.
    :param environ: Environment used to check for a display server.
    :param finder: Lookup for executables on ``PATH`` (``shutil.which``).
    """
    if not enabled:
        return None
    env = os.environ if environ is None else environ
    if finder("pbcopy"):
        return Clipboard(["pbcopy"])
    if finder("wl-copy") and env.get("WAYLAND_DISPLAY"):
        return Clipboard(["wl-copy"])
    if finder("xclip"):
        if env.get("DISPLAY"):
            return Clipboard(["xclip", "-selection", "clipboard"])
        logger.info("xclip found, but no X11 display detected. Clipboard disabled.")
    if finder("clip.exe"):
        return Clipboard(["clip.exe"])
    logger.info("No clipboard command (pbcopy, wl-copy, xclip, clip.exe) found. Clipboard disabled.")
    return None
