"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from birdstatus.bird.models import BGPSession, ProtocolState, Routes
from birdstatus.protocols.names import ProtocolNames

# BIRD 2 "show protocols all" with reply codes already stripped.
SHOW_PROTOCOLS_ALL = """\
Name       Proto      Table      State  Since         Info
device1    Device     ---        up     2024-03-01 10:15:02

direct1    Direct     ---        up     2024-03-01 10:15:02
  Channel ipv4
    State:          UP
    Table:          master4
    Preference:     240
    Input filter:   ACCEPT
    Output filter:  REJECT
    Routes:         2 imported, 0 exported, 2 preferred

TRANSIT_AS174_v4 BGP        ---        up     2024-03-01 10:15:06  Established
  BGP state:          Established
    Neighbor address: 192.0.2.1
    Neighbor AS:      174
    Local AS:         65530
    Neighbor ID:      192.0.2.1
  Channel ipv4
    State:          UP
    Table:          master4
    Preference:     100
    Input filter:   (unnamed)
    Output filter:  (unnamed)
    Routes:         950123 imported, 12 exported, 940001 preferred

PEER_AS13335_v6 BGP        ---        start  2024-03-01 10:15:02  Active        Socket: Connection refused
  BGP state:          Active
    Neighbor address: 2001:db8::13
    Neighbor AS:      13335
    Local AS:         65530
    Connect delay:    3.412/5
    Last error:       Socket: Connection refused
  Channel ipv6
    State:          DOWN
    Table:          master6
    Preference:     100
    Input filter:   (unnamed)
    Output filter:  (unnamed)
"""


def make_state(name: str, *, bgp: bool = False, state: str = "up",
               info: str = "", imported: int = -1, exported: int = -1,
               neighbor_as: int = 65000) -> ProtocolState:
    session = None
    if bgp:
        session = BGPSession(neighbor_address="192.0.2.10", neighbor_as=neighbor_as)
    return ProtocolState(
        name=name,
        proto="BGP" if bgp else "Direct",
        table="---",
        state=state,
        since="2024-03-01 10:15:02",
        info=info,
        routes=Routes(imported=imported, exported=exported),
        bgp=session,
    )


@pytest.fixture
def show_protocols_output() -> str:
    return SHOW_PROTOCOLS_ALL


@pytest.fixture
def protocol_names() -> ProtocolNames:
    return ProtocolNames.from_mapping({
        "TRANSIT_AS174_v4": {"name": "Cogent v4", "tags": ["transit", "edge"]},
        "PEER_AS13335_v6": {"name": "Cloudflare v6", "tags": ["peer"]},
    })


@pytest.fixture
def protocols_file(tmp_path: Path) -> Path:
    path = tmp_path / "protocols.json"
    path.write_text(json.dumps({
        "TRANSIT_AS174_v4": {
            "name": "Cogent v4", "tags": ["transit", "edge"], "asn": 174,
        },
        "PEER_AS13335_v6": {"name": "Cloudflare v6", "tags": ["peer"]},
    }))
    return path


@pytest.fixture
def state_factory():
    return make_state
