"""Parser for BIRD ``show protocols all`` output."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from birdstatus.bird.models import UNKNOWN_COUNT, BGPSession, ProtocolState, Routes
from birdstatus.errors import ParseError

logger = logging.getLogger(__name__)

_BANNER_RE = re.compile(r"^BIRD\s+\S+\s+ready\.?$")
_COLUMNS_RE = re.compile(r"^Name\s+Proto\s+Table\s+State\s+Since\s+Info$")
_HEADER_RE = re.compile(
    r"^(?P<name>\S+)\s+(?P<proto>\S+)\s+(?P<table>\S+)\s+(?P<state>\S+)\s+"
    r"(?P<since>\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2}(?:\.\d+)?|\S+)"
    r"(?:\s+(?P<info>.*?))?\s*$"
)

_ROUTES_RE = re.compile(r"^routes:\s*(?P<counts>.*)$", re.IGNORECASE)
_ROUTE_COUNT_RE = re.compile(r"(\S+)\s+(imported|exported)\b", re.IGNORECASE)
_NEIGHBOR_ADDRESS_RE = re.compile(r"^neighbor address:\s*(\S+)", re.IGNORECASE)
_NEIGHBOR_AS_RE = re.compile(r"^neighbor as:\s*(\S+)", re.IGNORECASE)


@dataclass
class _Block:
    """Mutable accumulator for one protocol block while it is being read."""
    line_number: int
    name: str
    proto: str
    table: str
    state: str
    since: str
    info: str
    imported: int = UNKNOWN_COUNT
    exported: int = UNKNOWN_COUNT
    neighbor_address: str | None = None
    neighbor_as: int | None = None

    @property
    def is_bgp(self) -> bool:
        return self.proto.lower() == "bgp"

    def add_routes(self, counts: str, line_number: int) -> None:
        for value, kind in _ROUTE_COUNT_RE.findall(counts):
            count = _parse_int(value, f"{kind.lower()} route count", line_number)
            if kind.lower() == "imported":
                self.imported = _accumulate(self.imported, count)
            else:
                self.exported = _accumulate(self.exported, count)

    def build(self) -> ProtocolState:
        bgp = None
        if self.is_bgp:
            if self.neighbor_address is None or self.neighbor_as is None:
                raise ParseError(
                    f"BGP protocol {self.name!r} is missing its neighbor "
                    "address or neighbor AS",
                    self.line_number,
                )
            bgp = BGPSession(
                neighbor_address=self.neighbor_address,
                neighbor_as=self.neighbor_as,
            )
        return ProtocolState(
            name=self.name,
            proto=self.proto,
            table=self.table,
            state=self.state,
            since=self.since,
            info=self.info,
            routes=Routes(imported=self.imported, exported=self.exported),
            bgp=bgp,
        )


def _accumulate(current: int, count: int) -> int:
    # Multi-channel protocols report one Routes line per channel.
    if current == UNKNOWN_COUNT:
        return count
    return current + count


def _parse_int(value: str, what: str, line_number: int) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ParseError(f"invalid {what}: {value!r}", line_number) from None
    if number < 0:
        raise ParseError(f"negative {what}: {value!r}", line_number)
    return number


def parse_protocols(output: str) -> list[ProtocolState]:
    """Parse ``show protocols all`` output into protocol states.

    Blocks are delimited by header lines (text starting in column 0), so
    output without blank separators parses the same as BIRD's usual
    layout. The result keeps the order in which BIRD reported the
    protocols.

    Raises:
        ParseError: The text does not follow the expected block structure.
    """
    states: list[ProtocolState] = []
    seen: set[str] = set()
    block: _Block | None = None

    def finish(current: _Block | None) -> None:
        if current is None:
            return
        if current.name in seen:
            raise ParseError(
                f"duplicate protocol {current.name!r}", current.line_number,
            )
        seen.add(current.name)
        states.append(current.build())

    for line_number, line in enumerate(output.splitlines(), start=1):
        if not line.strip():
            continue

        if not line[0].isspace():
            stripped = line.rstrip()
            if _BANNER_RE.match(stripped) or _COLUMNS_RE.match(stripped):
                continue
            m = _HEADER_RE.match(stripped)
            if m is None:
                raise ParseError(f"unrecognized protocol header: {stripped!r}", line_number)
            finish(block)
            block = _Block(
                line_number=line_number,
                name=m.group("name"),
                proto=m.group("proto"),
                table=m.group("table"),
                state=m.group("state"),
                since=m.group("since"),
                info=m.group("info") or "",
            )
            continue

        if block is None:
            raise ParseError("detail line before any protocol header", line_number)
        _parse_detail(block, line.strip(), line_number)

    finish(block)
    logger.debug("Parsed %d protocols", len(states))
    return states


def _parse_detail(block: _Block, detail: str, line_number: int) -> None:
    m = _ROUTES_RE.match(detail)
    if m:
        block.add_routes(m.group("counts"), line_number)
        return

    if not block.is_bgp:
        return

    m = _NEIGHBOR_ADDRESS_RE.match(detail)
    if m:
        block.neighbor_address = m.group(1)
        return

    m = _NEIGHBOR_AS_RE.match(detail)
    if m:
        block.neighbor_as = _parse_int(m.group(1), "neighbor AS", line_number)
