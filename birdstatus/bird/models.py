"""Protocol state data models."""

from __future__ import annotations

from dataclasses import dataclass, field

UNKNOWN_COUNT = -1


@dataclass(frozen=True)
class Routes:
    imported: int = UNKNOWN_COUNT
    exported: int = UNKNOWN_COUNT


@dataclass(frozen=True)
class BGPSession:
    neighbor_address: str
    neighbor_as: int


@dataclass(frozen=True)
class ProtocolState:
    """One protocol instance as reported by ``show protocols all``.

    ``bgp`` is set if and only if the protocol is a BGP session.
    """
    name: str
    proto: str
    table: str
    state: str
    since: str
    info: str = ""
    routes: Routes = field(default_factory=Routes)
    bgp: BGPSession | None = None

    @property
    def is_bgp(self) -> bool:
        return self.bgp is not None
