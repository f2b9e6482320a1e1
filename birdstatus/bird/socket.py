"""BIRD control socket client."""

from __future__ import annotations

import logging
import re
import socket
from typing import BinaryIO

from birdstatus.errors import CommandError

logger = logging.getLogger(__name__)

DEFAULT_SOCKET = "/run/bird/bird.ctl"
DEFAULT_TIMEOUT = 10.0

# "DDDD-text" continues a reply, "DDDD text" ends it.
_REPLY_RE = re.compile(r"^(\d{4})([ -])(.*)$")


def _is_error_code(code: str) -> bool:
    # 8xxx: runtime error, 9xxx: parse error
    return code[0] in ("8", "9")


class BirdSocket:
    """Line-oriented client for the BIRD control socket."""

    def __init__(self, path: str = DEFAULT_SOCKET,
                 timeout: float = DEFAULT_TIMEOUT) -> None:
        self.path = path
        self.timeout = timeout
        self._sock: socket.socket | None = None
        self._reader: BinaryIO | None = None

    def connect(self) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)
        try:
            sock.connect(self.path)
        except OSError as exc:
            sock.close()
            raise CommandError(
                f"Unable to connect to BIRD socket {self.path}: {exc}"
            ) from exc
        self._sock = sock
        self._reader = sock.makefile("rb")
        try:
            welcome = self._read_reply()
        except CommandError:
            self.close()
            raise
        logger.debug("Connected to %s: %s", self.path, " ".join(welcome).strip())

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> BirdSocket:
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def run_command(self, command: str) -> str:
        """Send *command* and return the reply text with reply codes removed."""
        if self._sock is None:
            raise CommandError("Not connected to the BIRD socket")

        logger.debug("Sending command: %s", command)
        try:
            self._sock.sendall(command.encode("utf-8") + b"\n")
        except OSError as exc:
            raise CommandError(f"Sending {command!r} to BIRD failed: {exc}") from exc
        return "\n".join(self._read_reply())

    def _read_reply(self) -> list[str]:
        lines: list[str] = []
        while True:
            try:
                raw = self._reader.readline()
            except OSError as exc:
                raise CommandError(f"Reading from BIRD socket failed: {exc}") from exc
            if not raw:
                raise CommandError("BIRD closed the control socket before the reply ended")

            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            m = _REPLY_RE.match(line)
            if m is None:
                if line.startswith(" "):
                    lines.append(line[1:])
                    continue
                raise CommandError(f"Unexpected reply line from BIRD: {line!r}")

            code, separator, text = m.groups()
            if _is_error_code(code):
                raise CommandError(text.strip() or f"BIRD returned error code {code}")
            lines.append(text)
            if separator == " ":
                return lines


def run_command(command: str, socket_path: str = DEFAULT_SOCKET,
                timeout: float = DEFAULT_TIMEOUT) -> str:
    """Run a single command against the daemon and return its output."""
    with BirdSocket(socket_path, timeout=timeout) as bird:
        return bird.run_command(command)
