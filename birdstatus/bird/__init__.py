"""BIRD daemon access: control socket client and output parsing."""

from __future__ import annotations

from birdstatus.bird.models import UNKNOWN_COUNT, BGPSession, ProtocolState, Routes
from birdstatus.bird.parser import parse_protocols
from birdstatus.bird.socket import BirdSocket, run_command

SHOW_PROTOCOLS_COMMAND = "show protocols all"

__all__ = [
    "SHOW_PROTOCOLS_COMMAND",
    "UNKNOWN_COUNT",
    "BGPSession",
    "BirdSocket",
    "ProtocolState",
    "Routes",
    "parse_protocols",
    "run_command",
]
