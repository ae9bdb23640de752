import json
from typing import List

import pytest

from aicmd.config import ProviderSettings, Settings
from aicmd.errors import TransportError
from aicmd.transport import ProviderRequest, RawResponse, Transport


class StubTransport(Transport):
    """Records requests and replies with a canned status and body."""

    name = "stub"

    def __init__(self, body="", status_code=200):
        if not isinstance(body, str):
            body = json.dumps(body)
        self.body = body
        self.status_code = status_code
        self.requests: List[ProviderRequest] = []

    def send(self, request):
        self.requests.append(request)
        if not 200 <= self.status_code < 300:
            raise TransportError(
                f"API request failed with HTTP status {self.status_code}",
                status_code=self.status_code,
                body=self.body,
            )
        return RawResponse(status_code=self.status_code, text=self.body)


class Recorder:
    """Stand-in for click.echo capturing stdout and stderr lines."""

    def __init__(self):
        self.out: List[str] = []
        self.err: List[str] = []

    def __call__(self, message="", err=False):
        (self.err if err else self.out).append(message)


class FakeClipboard:
    def __init__(self, error=None):
        self.error = error
        self.copied: List[str] = []

    @property
    def name(self):
        return "fake"

    def copy(self, text):
        if self.error is not None:
            raise self.error
        self.copied.append(text)


@pytest.fixture
def settings():
    return Settings(
        openrouter=ProviderSettings(api_key="or-key"),
        openai=ProviderSettings(api_key="sk-test"),
        anthropic=ProviderSettings(api_key="ant-key"),
        local=ProviderSettings(base_url="http://localhost:1234/v1"),
        enable_clipboard=False,
    )


@pytest.fixture
def recorder():
    return Recorder()


def chat_body(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def anthropic_body(text):
    return {"content": [{"type": "text", "text": text}]}
