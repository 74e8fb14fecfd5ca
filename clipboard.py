import logging
import subprocess


logger = logging.getLogger(__name__)

COPY_COMMAND_DEFAULT = ["wl-copy"]
PASTE_COMMAND_DEFAULT = ["wl-paste", "--no-newline"]


class ClipboardUnavailable(Exception):
    """The system clipboard could not be read or written."""


class CommandClipboard:
    """Clipboard backed by external copy/paste commands (wl-copy, xclip, pbcopy)."""

    def __init__(self, copy_command=None, paste_command=None, timeout: float = 3.0):
        self.copy_command = list(copy_command or COPY_COMMAND_DEFAULT)
        self.paste_command = list(paste_command or PASTE_COMMAND_DEFAULT)
        self.timeout = timeout

    def write_text(self, text: str) -> None:
        try:
            subprocess.run(
                self.copy_command,
                input=text,
                text=True,
                encoding="utf-8",
                check=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError, UnicodeError) as exc:
            logger.warning("clipboard write via %s failed: %s", self.copy_command[0], exc)
            raise ClipboardUnavailable(str(exc)) from exc

    def read_text(self) -> str:
        try:
            proc = subprocess.run(
                self.paste_command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError, UnicodeError) as exc:
            logger.warning("clipboard read via %s failed: %s", self.paste_command[0], exc)
            raise ClipboardUnavailable(str(exc)) from exc
        return proc.stdout


class MemoryClipboard:
    """Process-local clipboard; stands in for the system clipboard in tests."""

    def __init__(self, text: str = ""):
        self.text = text

    def write_text(self, text: str) -> None:
        self.text = text

    def read_text(self) -> str:
        return self.text
