"""Strip formatting artifacts from model output.

Models asked for a bare command still sometimes wrap it in a Markdown
code block.  :func:`sanitize` removes one leading fence (optionally
tagged with a language such as ``bash``) and one trailing fence, then
trims whitespace.
"""

from __future__ import annotations

import re

from .errors import EmptyResult

# A language tag only counts as such when it ends the fence line, so
# "```ls -la```" keeps its "ls".
_LEADING_FENCE = re.compile(r"\A\s*```(?:[\w+#.-]*[ \t\r]*(?=\n|\Z))?")
_TRAILING_FENCE = re.compile(r"\s*```\s*\Z")


def sanitize(text: str) -> str:
    """Return the bare command contained in ``text``.

    :raises EmptyResult: If nothing remains after fence removal and trimming.
    """
    command = _LEADING_FENCE.sub("", text or "", count=1)
    command = _TRAILING_FENCE.sub("", command, count=1)
    command = command.strip()
    if not command:
        raise EmptyResult("Extracted command text is empty after parsing/processing")
    return command
