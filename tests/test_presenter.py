import subprocess

import pytest

from aicmd.clipboard import Clipboard, detect_clipboard
from aicmd.errors import ClipboardUnavailable
from aicmd.presenter import HEADER, RULE, present

from conftest import FakeClipboard


def test_present_without_clipboard(recorder):
    assert present("ls -la", echo=recorder) is False
    assert recorder.out == [HEADER, "ls -la", RULE]
    assert recorder.err == []


def test_present_copies(recorder):
    clipboard = FakeClipboard()
    assert present("ls -la", clipboard=clipboard, echo=recorder) is True
    assert clipboard.copied == ["ls -la"]
    assert recorder.err == ["(Command copied to clipboard)"]


def test_unavailable_clipboard_note(recorder):
    assert present("ls -la", echo=recorder, unavailable_note="Clipboard unavailable") is False
    assert recorder.out == [HEADER, "ls -la", RULE]
    assert recorder.err == ["(Clipboard unavailable)"]


def test_clipboard_failure_is_a_note(recorder):
    clipboard = FakeClipboard(error=ClipboardUnavailable("Failed to copy command to clipboard"))
    assert present("ls -la", clipboard=clipboard, echo=recorder) is False
    assert recorder.out == [HEADER, "ls -la", RULE]
    assert recorder.err == ["(Failed to copy command to clipboard)"]


def _finder(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


def test_detect_disabled():
    assert detect_clipboard(False, environ={}, finder=_finder("pbcopy")) is None


def test_detect_pbcopy():
    assert detect_clipboard(environ={}, finder=_finder("pbcopy")).argv == ["pbcopy"]


def test_detect_xclip_needs_display():
    assert detect_clipboard(environ={}, finder=_finder("xclip")) is None
    clipboard = detect_clipboard(environ={"DISPLAY": ":0"}, finder=_finder("xclip"))
    assert clipboard.argv == ["xclip", "-selection", "clipboard"]


def test_detect_wayland():
    clipboard = detect_clipboard(environ={"WAYLAND_DISPLAY": "wayland-0"}, finder=_finder("wl-copy", "xclip"))
    assert clipboard.argv == ["wl-copy"]


def test_detect_wsl():
    assert detect_clipboard(environ={}, finder=_finder("clip.exe")).argv == ["clip.exe"]


def test_detect_nothing():
    assert detect_clipboard(environ={"DISPLAY": ":0"}, finder=_finder()) is None


def test_clipboard_copy_pipes_stdin(monkeypatch):
    calls = []

    def fake_run(argv, **kwargs):
        calls.append((argv, kwargs))
        return subprocess.CompletedProcess(argv, 0)

    monkeypatch.setattr("aicmd.clipboard.subprocess.run", fake_run)
    Clipboard(["pbcopy"]).copy("ls -la")
    assert calls[0][0] == ["pbcopy"]
    assert calls[0][1]["input"] == "ls -la"


def test_clipboard_copy_failure(monkeypatch):
    def fake_run(argv, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr("aicmd.clipboard.subprocess.run", fake_run)
    with pytest.raises(ClipboardUnavailable) as exc:
        Clipboard(["xclip", "-selection", "clipboard"]).copy("ls")
    assert "xclip -selection clipboard" in str(exc.value)
