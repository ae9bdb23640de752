import dataclasses

import pytest
from fastapi.testclient import TestClient

from aicmd.config import Settings
from aicmd.dispatcher import Dispatcher
from aicmd.server import create_app

from conftest import StubTransport, chat_body


def _client(settings, transport):
    dispatcher = Dispatcher(settings, transport=transport, clipboard=None, echo=lambda *a, **k: None)
    return TestClient(create_app(dispatcher))


def test_generate_command(settings):
    client = _client(settings, StubTransport(chat_body("```bash\nls -la\n```")))
    response = client.post("/generate_command", json={"provider": "openai", "prompt": "list files"})
    assert response.status_code == 200
    assert response.json() == {"provider": "openai", "command": "ls -la"}


def test_input_alias_and_default_provider(settings):
    transport = StubTransport(chat_body("pwd"))
    response = _client(settings, transport).post("/generate_command", json={"input": "where am I"})
    assert response.status_code == 200
    assert response.json()["provider"] == "openai"


@pytest.mark.parametrize(
    "payload, settings_obj, transport, status",
    [
        ({"provider": "openai", "prompt": ""}, None, StubTransport(chat_body("ls")), 400),
        ({"provider": "gemini", "prompt": "x"}, None, StubTransport(chat_body("ls")), 400),
        ({"provider": "openai", "prompt": "x"}, Settings(), StubTransport(chat_body("ls")), 400),
        ({"provider": "openai", "prompt": "x"}, None, StubTransport("denied", status_code=401), 502),
        ({"provider": "openai", "prompt": "x"}, None, StubTransport("not json"), 502),
        ({"provider": "openai", "prompt": "x"}, None, StubTransport(chat_body("```\n```")), 502),
    ],
)
def test_error_mapping(settings, payload, settings_obj, transport, status):
    client = _client(settings_obj or settings, transport)
    response = client.post("/generate_command", json=payload)
    assert response.status_code == status
    assert response.json()["detail"]


def test_unusable_http_client_is_a_json_error(settings):
    dispatcher = Dispatcher(
        dataclasses.replace(settings, http_client="wget"), clipboard=None, echo=lambda *a, **k: None
    )
    response = TestClient(create_app(dispatcher)).post(
        "/generate_command", json={"provider": "openai", "prompt": "x"}
    )
    assert response.status_code == 500
    assert "wget" in response.json()["detail"]


def test_default_app_loads_settings(monkeypatch, settings):
    loaded = []

    def fake_load_settings():
        loaded.append(True)
        return dataclasses.replace(settings, http_client="wget")

    monkeypatch.setattr("aicmd.server.load_settings", fake_load_settings)
    client = TestClient(create_app())
    response = client.post("/generate_command", json={"provider": "openai", "prompt": "x"})
    assert loaded == [True]
    # credentials came from the loaded settings, so the call reaches transport selection
    assert response.status_code == 500
    assert "wget" in response.json()["detail"]
