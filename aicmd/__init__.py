"""Top-level package for aicmd.

This package contains the implementation of a command line tool named
``aicmd`` which converts a natural language request into a single
shell command by asking an AI provider (OpenRouter, OpenAI, Anthropic
or a locally hosted OpenAI-compatible server).  The provider adapters
live in ``providers.py``; ``transport.py``, ``normalizer.py`` and
``sanitizer.py`` carry a request to the provider and turn its response
into a bare command, and ``dispatcher.py`` composes them.

When this package is installed via pip you can invoke the CLI from
your shell using the ``aicmd`` entry point.  Alternatively you can run
``python -m aicmd`` from this directory for local development.
"""

from .dispatcher import Dispatcher, anthropic, local, openai, openrouter

__version__ = "0.1.0"

__all__ = [
    "Dispatcher",
    "anthropic",
    "local",
    "openai",
    "openrouter",
]
