"""Command line interface for aicmd.

This module defines the ``aicmd`` command using the ``click`` library.
It exposes several subcommands:

``aicmd openrouter|openai|anthropic|local <prompt>``
    Ask one provider for a shell command and print it.  The command is
    copied to the clipboard when one is available.

``aicmd ask --provider NAME <prompt>``
    Same as above with the provider chosen at run time (defaults to
    ``default_provider`` from the config file).

``aicmd configure``
    Store credentials and model overrides in ``~/.aicmd/config.yaml``.

``aicmd doctor``
    Report which HTTP client and clipboard command were detected and
    which providers have credentials.

``aicmd serve``
    Launch a FastAPI server exposing a JSON API for external
    integrations.  The server listens on port 5005 by default.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from .clipboard import detect_clipboard
from .config import PROVIDER_NAMES, config_file, load_config, load_settings, save_config
from .dispatcher import Dispatcher
from .errors import ConfigError, MissingCredential, ProviderError
from .profiles import ProviderKind
from .providers import get_provider
from .transport import available_backends, select_transport


def _settings(ctx: click.Context):
    obj = ctx.ensure_object(dict)
    if "settings" not in obj:
        settings = load_settings(obj.get("config_path"))
        if obj.get("no_clipboard"):
            settings = dataclasses.replace(settings, enable_clipboard=False)
        obj["settings"] = settings
    return obj["settings"]


def _dispatcher(ctx: click.Context) -> Dispatcher:
    obj = ctx.ensure_object(dict)
    if "dispatcher" not in obj:
        obj["dispatcher"] = Dispatcher(_settings(ctx))
    return obj["dispatcher"]


def _run_prompt(ctx: click.Context, provider: str, prompt: Tuple[str, ...]) -> None:
    # Join prompt parts into a single string (to allow multiple words)
    prompt_text = " ".join(prompt).strip()
    try:
        _dispatcher(ctx).run(provider, prompt_text)
    except ProviderError as exc:
        if exc.provider:
            click.echo(f"Error ({exc.provider}): {exc}", err=True)
        else:
            click.echo(f"Error: {exc}", err=True)
        if isinstance(exc, MissingCredential):
            path = ctx.ensure_object(dict).get("config_path") or config_file()
            click.echo(f"Configure it with 'aicmd configure' or edit {path}", err=True)
        ctx.exit(1)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option("--no-clipboard", is_flag=True, help="Do not copy the command to the clipboard.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to an alternative config file.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, no_clipboard: bool, config_path: Optional[Path]) -> None:
    """aicmd – translate natural language into a shell command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    obj = ctx.ensure_object(dict)
    obj.setdefault("config_path", config_path)
    obj.setdefault("no_clipboard", no_clipboard)


def _provider_command(kind: ProviderKind) -> None:
    @click.argument("prompt", nargs=-1, type=str)
    @click.pass_context
    def command(ctx: click.Context, prompt: Tuple[str, ...]) -> None:
        _run_prompt(ctx, kind.value, prompt)

    cli.command(
        name=kind.value,
        help=f"Generate a shell command for PROMPT using {get_provider(kind).profile.label}.",
    )(command)


for _kind in ProviderKind:
    _provider_command(_kind)


@cli.command(name="ask")
@click.option(
    "--provider",
    "-p",
    type=click.Choice(PROVIDER_NAMES, case_sensitive=False),
    default=None,
    help="Provider to use (defaults to default_provider from the config file).",
)
@click.argument("prompt", nargs=-1, type=str)
@click.pass_context
def ask(ctx: click.Context, provider: Optional[str], prompt: Tuple[str, ...]) -> None:
    """Generate a shell command for PROMPT with the chosen provider."""
    _run_prompt(ctx, provider or _settings(ctx).default_provider, prompt)


@cli.command()
@click.option("--provider", required=True, type=click.Choice(PROVIDER_NAMES, case_sensitive=False))
@click.option("--api-key", type=str, default=None, help="API key for the provider")
@click.option("--model", type=str, default=None, help="Model name (e.g. gpt-4o-mini)")
@click.option("--base-url", type=str, default=None, help="Base URL for the local provider")
@click.option("--max-tokens", type=int, default=None, help="Maximum output size")
@click.option("--default", "make_default", is_flag=True, help="Use this provider for 'aicmd ask'.")
@click.pass_context
def configure(
    ctx: click.Context,
    provider: str,
    api_key: Optional[str],
    model: Optional[str],
    base_url: Optional[str],
    max_tokens: Optional[int],
    make_default: bool,
) -> None:
    """Store credentials and overrides for a provider."""
    path = ctx.ensure_object(dict).get("config_path") or config_file()
    provider = provider.lower()
    config = load_config(path)
    providers = config.setdefault("providers", {})
    section = providers.setdefault(provider, {})
    updates = {"api_key": api_key, "model": model, "base_url": base_url, "max_tokens": max_tokens}
    for key, value in updates.items():
        if value is not None:
            section[key] = value
    if make_default:
        config["default_provider"] = provider
    written = save_config(config, path)
    click.echo(f"Configuration updated. Provider={provider}, file={written}")


@cli.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Show detected tools and configured providers."""
    settings = _settings(ctx)
    click.echo(f"Config file: {ctx.ensure_object(dict).get('config_path') or config_file()}")
    click.echo(f"Installed HTTP clients: {', '.join(available_backends()) or 'none'}")
    try:
        click.echo(f"HTTP client: {select_transport(settings.http_client).name}")
    except ConfigError as exc:
        click.echo(f"HTTP client: unavailable ({exc})")
    clipboard = detect_clipboard(settings.enable_clipboard)
    if not settings.enable_clipboard:
        click.echo("Clipboard: disabled")
    else:
        click.echo(f"Clipboard: {clipboard.name if clipboard else 'unavailable'}")
    for kind in ProviderKind:
        adapter = get_provider(kind, settings)
        try:
            adapter.build_request("ping")
        except MissingCredential as exc:
            click.echo(f"  {kind.value:<11} not configured ({exc})")
        else:
            click.echo(f"  {kind.value:<11} ok, model={adapter.model or 'server default'}")


@cli.command(name="serve")
@click.option("--host", default="127.0.0.1", help="Bind address for the API server")
@click.option("--port", default=5005, help="Port for the API server")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Run a server exposing a JSON API for generating commands."""
    # Import fastapi lazily to keep CLI start-up fast
    try:
        import uvicorn

        from .server import create_app
    except ImportError:
        click.echo("FastAPI and uvicorn are required to run the server. Please install them with pip.")
        ctx.exit(1)
        return

    settings = dataclasses.replace(_settings(ctx), enable_clipboard=False)
    app = create_app(Dispatcher(settings, clipboard=None))
    click.echo(f"aicmd server running on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
