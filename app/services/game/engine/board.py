"""Fixed transport table for the 100-cell board."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal

# fmt: off
TRANSPORTS: Mapping[int, int] = MappingProxyType({
    # Ladders (go UP)
     2: 38,   4: 14,   9: 31,  21: 42,  28: 84,
    36: 44,  51: 67,  71: 91,  80: 100,
    # Snakes (go DOWN)
    16:  6,  47: 26,  49: 11,  56: 53,  62: 19,
    64: 60,  87: 24,  93: 73,  95: 75,  98: 78,
})
# fmt: on

TransportKind = Literal["ladder", "snake"]


def transport_destination(
    cell: int, transports: Mapping[int, int] = TRANSPORTS
) -> int | None:
    return transports.get(cell)


def transport_kind(source: int, destination: int) -> TransportKind:
    return "ladder" if destination > source else "snake"


def is_ladder(cell: int, transports: Mapping[int, int] = TRANSPORTS) -> bool:
    dest = transports.get(cell)
    return dest is not None and dest > cell


def is_snake(cell: int, transports: Mapping[int, int] = TRANSPORTS) -> bool:
    dest = transports.get(cell)
    return dest is not None and dest < cell
