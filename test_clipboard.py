import subprocess
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from clipboard import ClipboardUnavailable, CommandClipboard, MemoryClipboard


def test_write_text_pipes_into_copy_command():
    clip = CommandClipboard(["fake-copy"], ["fake-paste"])
    with patch("subprocess.run") as run:
        clip.write_text("a\tb")
    run.assert_called_once()
    args, kwargs = run.call_args
    assert args[0] == ["fake-copy"]
    assert kwargs["input"] == "a\tb"
    assert kwargs["text"] is True
    assert kwargs["check"] is True


def test_read_text_returns_stdout():
    clip = CommandClipboard(["fake-copy"], ["fake-paste"])
    with patch("subprocess.run", return_value=SimpleNamespace(stdout="x\ty\n")) as run:
        assert clip.read_text() == "x\ty\n"
    assert run.call_args[0][0] == ["fake-paste"]
    assert run.call_args[1]["capture_output"] is True


@pytest.mark.parametrize(
    "error",
    [
        FileNotFoundError("wl-copy"),
        subprocess.CalledProcessError(1, ["wl-copy"]),
        subprocess.TimeoutExpired(["wl-copy"], 3.0),
    ],
)
def test_command_failures_raise_clipboard_unavailable(error):
    clip = CommandClipboard()
    with patch("subprocess.run", side_effect=error):
        with pytest.raises(ClipboardUnavailable):
            clip.write_text("a")
        with pytest.raises(ClipboardUnavailable):
            clip.read_text()


def test_default_commands():
    clip = CommandClipboard()
    assert clip.copy_command == ["wl-copy"]
    assert clip.paste_command == ["wl-paste", "--no-newline"]


def test_memory_clipboard():
    clip = MemoryClipboard()
    assert clip.read_text() == ""
    clip.write_text("hello")
    assert clip.read_text() == "hello"


@pytest.mark.parametrize(
    "error",
    [
        UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
        UnicodeEncodeError("ascii", "é", 0, 1, "ordinal not in range"),
    ],
)
def test_undecodable_clipboard_data_is_unavailable(error):
    clip = CommandClipboard(["fake-copy"], ["fake-paste"])
    with patch("subprocess.run", side_effect=error):
        with pytest.raises(ClipboardUnavailable):
            clip.read_text()
        with pytest.raises(ClipboardUnavailable):
            clip.write_text("é")


def test_clipboard_commands_use_utf8():
    clip = CommandClipboard(["fake-copy"], ["fake-paste"])
    with patch("subprocess.run", return_value=SimpleNamespace(stdout="")) as run:
        clip.write_text("é")
        clip.read_text()
    for call in run.call_args_list:
        assert call[1]["encoding"] == "utf-8"
