"""Tests for status table rows, coloring, and rendering."""

from __future__ import annotations

import io
from dataclasses import replace

import pytest
from rich.console import Console
from rich.text import Text

from birdstatus.bird.models import BGPSession
from birdstatus.protocols.names import DisplayEntry, ProtocolNames
from birdstatus.ui.table import (
    HEADER,
    StatusLevel,
    build_header,
    build_row,
    build_rows,
    classify_status,
    color_status,
    format_count,
    render_table,
)


def _plain(row):
    return [cell.plain if isinstance(cell, Text) else cell for cell in row]


# ── Status coloring ──────────────────────────────────────────────────

@pytest.mark.parametrize("value, expected", [
    ("up", StatusLevel.SUCCESS),
    ("Established", StatusLevel.SUCCESS),
    ("down", StatusLevel.FAILURE),
    ("Idle          Received: Hold timer expired Error", StatusLevel.FAILURE),
    ("start", StatusLevel.PENDING),
    ("Connect", StatusLevel.PENDING),
    ("Active        Socket: Connection refused", StatusLevel.PENDING),
    ("Running", None),
    ("", None),
    ("Up", None),
    ("established", None),
    ("error", None),
])
def test_classify_status(value, expected):
    assert classify_status(value) is expected


def test_classify_status_first_rule_wins():
    # Matches both the failure and in-progress rules
    assert classify_status("Connect Error") is StatusLevel.FAILURE


def test_color_status_styles():
    assert color_status("up").style == "green"
    assert color_status("down").style == "red"
    assert color_status("start").style == "yellow"
    plain = color_status("Running")
    assert plain.plain == "Running"
    assert plain.style == ""


def test_format_count():
    assert format_count(-1) == ""
    assert format_count(0) == "0"
    assert format_count(950123) == "950123"


# ── Rows ─────────────────────────────────────────────────────────────

def test_header_with_and_without_tags():
    assert build_header() == HEADER
    assert build_header(show_tags=True) == [*HEADER, "Tags"]
    assert len(build_header(show_tags=True)) == 9


def test_build_row_bgp(state_factory):
    state = state_factory("TRANSIT_AS174_v4", bgp=True, neighbor_as=174,
                          info="Established", imported=10, exported=-1)
    entry = DisplayEntry(name="Cogent v4", tags=("transit", "edge"))

    row = build_row(state, entry, show_tags=True)

    assert _plain(row) == [
        "Cogent v4", "174", "192.0.2.10", "up", "10", "",
        "2024-03-01 10:15:02", "Established", "transit, edge",
    ]
    assert row[3].style == "green"
    assert row[7].style == "green"


def test_build_row_non_bgp_uses_placeholders(state_factory):
    state = state_factory("device1", state="down")
    row = build_row(state, DisplayEntry(name="device1"))

    assert len(row) == 8
    assert _plain(row)[1:3] == ["-", "-"]
    assert row[3].style == "red"
    assert _plain(row)[4:6] == ["", ""]


def test_build_row_empty_tags(state_factory):
    row = build_row(state_factory("device1"), DisplayEntry(name="device1"), show_tags=True)
    assert row[8].plain == ""


def test_build_rows_resolves_names(state_factory, protocol_names):
    states = [
        state_factory("device1"),
        state_factory("TRANSIT_AS174_v4", bgp=True),
    ]
    rows = build_rows(states, protocol_names)
    assert [row[0].plain for row in rows] == ["device1", "Cogent v4"]


# ── Rendering ────────────────────────────────────────────────────────

def _render(rows, header=HEADER) -> str:
    buf = io.StringIO()
    console = Console(file=buf, width=160, force_terminal=True, color_system="standard")
    render_table(header, rows, console)
    return buf.getvalue()


def test_render_table_contains_cells(state_factory, protocol_names):
    states = [state_factory("TRANSIT_AS174_v4", bgp=True, imported=42)]
    out = _render(build_rows(states, protocol_names))

    for column in HEADER:
        assert column in out
    assert "Cogent v4" in out
    assert "42" in out
    assert "\x1b[32m" in out  # green "up"


def test_render_is_deterministic(state_factory, protocol_names):
    states = [
        state_factory("device1", state="down"),
        state_factory("TRANSIT_AS174_v4", bgp=True, info="Established"),
        state_factory("PEER_AS13335_v6", bgp=True, state="start",
                      info="Active        Socket: Connection refused"),
    ]
    first = _render(build_rows(states, protocol_names, show_tags=True),
                    build_header(show_tags=True))
    second = _render(build_rows(states, protocol_names, show_tags=True),
                     build_header(show_tags=True))
    assert first == second


def test_render_empty_table():
    out = _render([])
    assert "Peer" in out


def test_render_never_truncates_on_narrow_console(state_factory):
    state = state_factory("PEER_AS13335_v6", bgp=True, state="start",
                          info="Active        Socket: Connection refused")
    state = replace(state, bgp=BGPSession("2001:db8:ffff:1234::13", 13335))
    entry = DisplayEntry(name="Cloudflare Frankfurt v6", tags=("peer", "edge"))

    buf = io.StringIO()
    # Not a terminal: rich falls back to 80 columns
    console = Console(file=buf, width=80)
    render_table(build_header(show_tags=True),
                 [build_row(state, entry, show_tags=True)], console)
    out = buf.getvalue()

    assert "2001:db8:ffff:1234::13" in out
    assert "Active        Socket: Connection refused" in out
    assert "Cloudflare Frankfurt v6" in out
    assert "peer, edge" in out
    assert "…" not in out
    assert max(len(line) for line in out.splitlines()) > 80


def test_build_row_does_not_interpret_markup(state_factory):
    entry = DisplayEntry(name="Example [bold]AS65000", tags=("[red]edge",))
    row = build_row(state_factory("peer1", bgp=True), entry, show_tags=True)
    assert row[0].plain == "Example [bold]AS65000"
    assert row[8].plain == "[red]edge"


@pytest.mark.parametrize("name", [
    "Example [bold]AS65000",
    "Example [/]x",
])
def test_render_shows_bracketed_names_verbatim(state_factory, name):
    rows = [build_row(state_factory("peer1", bgp=True), DisplayEntry(name=name))]
    out = _render(rows)
    assert name in out
