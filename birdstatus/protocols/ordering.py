"""Protocol ordering and filtering for the status table."""

from __future__ import annotations

from functools import partial
from typing import Collection, Iterable

from birdstatus.bird.models import ProtocolState
from birdstatus.protocols.names import ProtocolNames
from birdstatus.rules import Rule, first_match

# Naming-convention prefixes, highest priority first (matched case-insensitively)
PREFIX_ORDER: tuple[str, ...] = (
    "internal",
    "transit",
    "collector",
    "rs",
    "peer",
    "client",
    "downstream",
)


def _has_prefix(prefix: str, name: str) -> bool:
    return name.startswith(prefix)


_PREFIX_RULES: list[Rule[int]] = [
    (partial(_has_prefix, prefix), index)
    for index, prefix in enumerate(PREFIX_ORDER)
]


def prefix_priority(name: str) -> int:
    """Rank *name* by the first known prefix it starts with.

    Names matching no prefix get ``len(PREFIX_ORDER)`` and sort last.
    """
    return first_match(_PREFIX_RULES, name.lower(), len(PREFIX_ORDER))


def sort_key(state: ProtocolState) -> tuple:
    # Non-BGP keys are all equal, so the stable sort keeps their input order.
    if state.bgp is None:
        return (0,)
    # The raw name breaks ties between names differing only in case.
    return (1, prefix_priority(state.name), state.name.lower(), state.name)


def sort_protocols(states: Iterable[ProtocolState]) -> list[ProtocolState]:
    """Non-BGP protocols first in report order, then BGP by prefix and name."""
    return sorted(states, key=sort_key)


def filter_protocols(
    states: Iterable[ProtocolState],
    names: ProtocolNames,
    *,
    only_bgp: bool = False,
    filter_tags: Collection[str] = (),
) -> list[ProtocolState]:
    """Drop protocols excluded by the BGP-only flag or the tag filter.

    An empty *filter_tags* disables tag filtering.
    """
    wanted = set(filter_tags)
    selected: list[ProtocolState] = []
    for state in states:
        if only_bgp and state.bgp is None:
            continue
        if wanted and wanted.isdisjoint(names.resolve(state.name).tags):
            continue
        selected.append(state)
    return selected


def select_protocols(
    states: Iterable[ProtocolState],
    names: ProtocolNames,
    *,
    only_bgp: bool = False,
    filter_tags: Collection[str] = (),
) -> list[ProtocolState]:
    """Sort then filter, producing the protocols to display."""
    return filter_protocols(
        sort_protocols(states), names,
        only_bgp=only_bgp, filter_tags=filter_tags,
    )
