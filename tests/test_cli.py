import yaml
from click.testing import CliRunner

from aicmd.cli import cli
from aicmd.config import Settings
from aicmd.dispatcher import Dispatcher

from conftest import StubTransport, chat_body


def _invoke(args, settings, transport):
    dispatcher = Dispatcher(settings, transport=transport, clipboard=None)
    return CliRunner().invoke(cli, args, obj={"dispatcher": dispatcher, "settings": settings})


def test_provider_command_prints_command(settings):
    transport = StubTransport(chat_body("```bash\nls -la\n```"))
    result = _invoke(["openai", "list", "all", "files"], settings, transport)
    assert result.exit_code == 0, result.output
    assert "--- Generated Command ---" in result.output
    assert "ls -la" in result.output
    assert transport.requests[0].body["messages"][1]["content"] == "list all files"


def test_missing_credential_exit_code():
    transport = StubTransport(chat_body("ls"))
    result = _invoke(["anthropic", "list", "files"], Settings(), transport)
    assert result.exit_code == 1
    assert "Error (anthropic): ANTHROPIC_API_KEY is not set" in result.output
    assert transport.requests == []


def test_empty_prompt_exit_code(settings):
    result = _invoke(["local"], settings, StubTransport(chat_body("ls")))
    assert result.exit_code == 1
    assert "Error (local): Empty prompt provided" in result.output


def test_transport_error_exit_code(settings):
    result = _invoke(["openrouter", "x"], settings, StubTransport("unauthorized", status_code=401))
    assert result.exit_code == 1
    assert "HTTP status 401" in result.output
    assert "Generated Command" not in result.output


def test_ask_uses_default_provider(settings):
    transport = StubTransport(chat_body("pwd"))
    result = _invoke(["ask", "where", "am", "I"], settings, transport)
    assert result.exit_code == 0, result.output
    assert "api.openai.com" in transport.requests[0].url


def test_ask_with_provider_option(settings):
    transport = StubTransport(chat_body("pwd"))
    result = _invoke(["ask", "--provider", "local", "where", "am", "I"], settings, transport)
    assert result.exit_code == 0, result.output
    assert transport.requests[0].url == "http://localhost:1234/v1/chat/completions"


def test_configure_writes_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    result = CliRunner().invoke(
        cli,
        ["--config", str(path), "configure", "--provider", "local", "--base-url", "http://localhost:1234/v1", "--default"],
    )
    assert result.exit_code == 0, result.output
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["providers"]["local"] == {"base_url": "http://localhost:1234/v1"}
    assert data["default_provider"] == "local"

    result = CliRunner().invoke(cli, ["--config", str(path), "configure", "--provider", "local", "--model", "qwen"])
    assert result.exit_code == 0, result.output
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["providers"]["local"] == {"base_url": "http://localhost:1234/v1", "model": "qwen"}


def test_doctor_reports_providers(settings):
    result = CliRunner().invoke(cli, ["doctor"], obj={"settings": Settings()})
    assert result.exit_code == 0, result.output
    assert "openai" in result.output
    assert "not configured (OPENAI_API_KEY is not set)" in result.output
    assert "HTTP client: httpx" in result.output

    result = CliRunner().invoke(cli, ["doctor"], obj={"settings": settings})
    assert "ok, model=gpt-4o-mini" in result.output
    assert "Clipboard: disabled" in result.output


def test_missing_credential_hint_names_config_option(tmp_path):
    path = tmp_path / "custom.yaml"
    transport = StubTransport(chat_body("ls"))
    dispatcher = Dispatcher(Settings(), transport=transport, clipboard=None)
    result = CliRunner().invoke(cli, ["--config", str(path), "openai", "list"], obj={"dispatcher": dispatcher})
    assert result.exit_code == 1
    assert f"or edit {path}" in result.output
