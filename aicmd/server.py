"""JSON API exposing command generation over HTTP.

``POST /generate_command`` accepts ``{"provider": ..., "prompt": ...}``
(``input`` is accepted as an alias for ``prompt``) and returns
``{"provider": ..., "command": ...}``.  The command is never executed,
printed or copied; callers decide what to do with it.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import load_settings
from .dispatcher import Dispatcher
from .errors import (
    ConfigError,
    ExtractionFailed,
    InvalidInput,
    MissingCredential,
    ProviderError,
    SanitizationError,
    TransportError,
    UnknownProvider,
)

ERROR_STATUS = (
    (InvalidInput, 400),
    (UnknownProvider, 400),
    (MissingCredential, 400),
    (TransportError, 502),
    (ExtractionFailed, 502),
    (SanitizationError, 502),
)


def status_for(exc: ProviderError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    """Build the FastAPI application around ``dispatcher``."""
    if dispatcher is None:
        dispatcher = Dispatcher(load_settings(), clipboard=None)
    app = FastAPI(title="aicmd server", version="1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/generate_command")
    def generate_command(request: dict) -> dict:
        prompt_text = request.get("prompt") or request.get("input")
        if not prompt_text or not isinstance(prompt_text, str):
            raise HTTPException(status_code=400, detail="'prompt' field must be a non-empty string")
        provider = request.get("provider") or dispatcher.settings.default_provider
        try:
            command = dispatcher.generate(provider, prompt_text)
        except ProviderError as exc:
            raise HTTPException(status_code=status_for(exc), detail=str(exc))
        except ConfigError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
        return {"provider": str(provider).strip().lower(), "command": command}

    return app
