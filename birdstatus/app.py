"""Application orchestrator: runs the status pipeline end to end."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.text import Text

from birdstatus.bird import SHOW_PROTOCOLS_COMMAND, parse_protocols, run_command
from birdstatus.config.settings import Settings, load_config
from birdstatus.errors import BirdStatusError
from birdstatus.protocols.names import ProtocolNames, load_protocol_names
from birdstatus.protocols.ordering import select_protocols
from birdstatus.ui.logging_handler import ConsoleLogHandler
from birdstatus.ui.table import build_header, build_rows, render_table

logger = logging.getLogger(__name__)

# (command, socket path, timeout) -> raw output
CommandRunner = Callable[[str, str, float], str]


@dataclass
class StatusOptions:
    """Command-line options for one status run."""
    real_protocol_names: bool = False
    only_bgp: bool = False
    show_tags: bool = False
    filter_tags: list[str] = field(default_factory=list)
    socket: str | None = None
    verbose: bool = False


class Application:
    """Top-level orchestrator for a single status query."""

    def __init__(
        self,
        options: StatusOptions,
        config_path: str | Path | None = None,
        *,
        console: Console | None = None,
        err_console: Console | None = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self.options = options
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self._runner = runner
        self._setup_logging()

        self.resolve_names = not options.real_protocol_names
        try:
            self.settings = load_config(config_path)
        except (OSError, ValueError) as exc:
            logger.warning(
                "Error loading config, falling back to raw protocol names: %s", exc,
            )
            self.settings = Settings()
            self.resolve_names = False
        self._apply_log_level()

    @property
    def socket_path(self) -> str:
        return self.options.socket or self.settings.bird_socket

    def run(self) -> int:
        """Run the pipeline and return the process exit status."""
        try:
            self._run()
        except BirdStatusError as exc:
            logger.debug("Status run aborted", exc_info=True)
            self.err_console.print(Text(f"Error: {exc}", style="bold red"))
            return 1
        return 0

    def _run(self) -> None:
        output = self._runner(
            SHOW_PROTOCOLS_COMMAND, self.socket_path, self.settings.timeout,
        )
        names = self._load_names()
        states = parse_protocols(output)

        selected = select_protocols(
            states, names,
            only_bgp=self.options.only_bgp,
            filter_tags=self.options.filter_tags,
        )
        logger.debug("Showing %d of %d protocols", len(selected), len(states))

        render_table(
            build_header(self.options.show_tags),
            build_rows(selected, names, show_tags=self.options.show_tags),
            self.console,
        )

    def _load_names(self) -> ProtocolNames:
        if not self.resolve_names:
            return ProtocolNames.empty()
        return load_protocol_names(self.settings.protocols_path)

    def _setup_logging(self) -> None:
        root = logging.getLogger()
        for handler in list(root.handlers):
            if isinstance(handler, ConsoleLogHandler):
                root.removeHandler(handler)
        root.addHandler(ConsoleLogHandler(self.err_console))
        # Config warnings must be visible before the configured level is known
        root.setLevel(logging.DEBUG if self.options.verbose else logging.WARNING)

    def _apply_log_level(self) -> None:
        level = logging.DEBUG if self.options.verbose else self.settings.log_level
        logging.getLogger().setLevel(level)
