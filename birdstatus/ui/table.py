"""Status table rendering: row mapping, status coloring, and output."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from rich import box
from rich.console import Console
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from birdstatus.bird.models import UNKNOWN_COUNT, ProtocolState
from birdstatus.protocols.names import DisplayEntry, ProtocolNames
from birdstatus.rules import Rule, first_match

HEADER = ["Peer", "AS", "Neighbor", "State", "In", "Out", "Since", "Info"]
TAGS_COLUMN = "Tags"
PLACEHOLDER = "-"

Cell = Text

# Measuring bound wide enough that no column is ever collapsed
_UNBOUNDED_WIDTH = 1_000_000


class StatusLevel(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


STATUS_STYLES = {
    StatusLevel.SUCCESS: "green",
    StatusLevel.FAILURE: "red",
    StatusLevel.PENDING: "yellow",
}

# Evaluated in order; matching is case-sensitive on the raw value.
# "Error" and "Connect" are plain substring checks, so operator-written
# info text containing them is colored too.
_STATUS_RULES: list[Rule[StatusLevel | None]] = [
    (lambda s: s in ("up", "Established"), StatusLevel.SUCCESS),
    (lambda s: s == "down" or "Error" in s, StatusLevel.FAILURE),
    (lambda s: s == "start" or "Connect" in s, StatusLevel.PENDING),
]


def classify_status(value: str) -> StatusLevel | None:
    return first_match(_STATUS_RULES, value, None)


def color_status(value: str) -> Text:
    level = classify_status(value)
    if level is None:
        return Text(value)
    return Text(value, style=STATUS_STYLES[level])


def format_count(count: int) -> str:
    if count == UNKNOWN_COUNT:
        return ""
    return str(count)


def build_header(show_tags: bool = False) -> list[str]:
    if show_tags:
        return [*HEADER, TAGS_COLUMN]
    return list(HEADER)


def build_row(state: ProtocolState, entry: DisplayEntry, *,
              show_tags: bool = False) -> list[Cell]:
    """Map one protocol to its table cells (8, or 9 with tags)."""
    neighbor_as, neighbor_address = PLACEHOLDER, PLACEHOLDER
    if state.bgp is not None:
        neighbor_as = format_count(state.bgp.neighbor_as)
        neighbor_address = state.bgp.neighbor_address

    # Text cells are never parsed as console markup
    row: list[Cell] = [
        Text(entry.name),
        Text(neighbor_as),
        Text(neighbor_address),
        color_status(state.state),
        Text(format_count(state.routes.imported)),
        Text(format_count(state.routes.exported)),
        Text(state.since),
        color_status(state.info),
    ]
    if show_tags:
        row.append(Text(", ".join(entry.tags)))
    return row


def build_rows(states: Iterable[ProtocolState], names: ProtocolNames, *,
               show_tags: bool = False) -> list[list[Cell]]:
    return [
        build_row(state, names.resolve(state.name), show_tags=show_tags)
        for state in states
    ]


def render_table(header: Sequence[str], rows: Iterable[Sequence[Cell]],
                 console: Console | None = None) -> None:
    """Print the status table to *console* (stdout by default).

    Cells are never truncated: a table wider than the console is printed
    at its natural width, uncropped.
    """
    console = console or Console()
    table = Table(box=box.SIMPLE_HEAD, header_style="bold", pad_edge=False)
    for column in header:
        table.add_column(column, no_wrap=True)
    for row in rows:
        table.add_row(*row)

    natural = Measurement.get(
        console, console.options.update(max_width=_UNBOUNDED_WIDTH), table,
    ).maximum
    if natural > console.width:
        table.width = natural
    console.print(table, crop=False)
