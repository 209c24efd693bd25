# ------------------------------
# Tile Identity
# ------------------------------
#
# A tile is addressed either by the triple (position, tile number, side) or by
# the packed unique ID  uniqueID = side * (100 * position + tile number).
# Everything downstream works on the decoded TileID.

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional, Tuple, Union
import numbers

from epdgeom.epd_errors import InvalidTileID

N_POSITIONS = 12
N_TILES = 31
N_ROWS = 16


class Side(IntEnum):
    """Wheel side, signed like the unique ID"""
    EAST = -1
    WEST = 1

    @classmethod
    def parse(cls, value) -> "Side":
        """Accept -1/+1, a Side, or the strings 'east'/'west' (any case)."""
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("east", "e"):
                return cls.EAST
            if key in ("west", "w"):
                return cls.WEST
            try:
                value = int(key)
            except ValueError:
                raise InvalidTileID(f"side must be east/west or -1/+1, got {value!r}", value)
        _check_integer("side", value)
        if value not in (-1, 1):
            raise InvalidTileID(f"side must be -1 (east) or +1 (west), got {value}", value)
        return cls(int(value))


def _check_integer(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidTileID(f"{name} must be an integer, got {value!r}", value)


def _check_range(name: str, value, lo: int, hi: int) -> None:
    _check_integer(name, value)
    if not lo <= value <= hi:
        raise InvalidTileID(f"{name} must be in [{lo},{hi}], got {value}", value)


def row_of(tile_number: int) -> int:
    """Tile row [1,16]. Tile 1 is alone in row 1; tiles 2k and 2k+1 share row k+1."""
    _check_range("tile number", tile_number, 1, N_TILES)
    return int(tile_number) // 2 + 1


@dataclass(frozen=True)
class TileID:
    """Immutable identity of one EPD tile"""
    position: int
    tile_number: int
    side: Side

    def __post_init__(self):
        _check_range("position", self.position, 1, N_POSITIONS)
        _check_range("tile number", self.tile_number, 1, N_TILES)
        object.__setattr__(self, "position", int(self.position))
        object.__setattr__(self, "tile_number", int(self.tile_number))
        object.__setattr__(self, "side", Side.parse(self.side))

    @classmethod
    def from_unique_id(cls, unique_id: int) -> "TileID":
        return cls(*decode(unique_id))

    @property
    def unique_id(self) -> int:
        return int(self.side) * (100 * self.position + self.tile_number)

    @property
    def row(self) -> int:
        return row_of(self.tile_number)

    @property
    def is_west(self) -> bool:
        return self.side is Side.WEST

    @property
    def is_east(self) -> bool:
        return self.side is Side.EAST

    @property
    def is_pentagon(self) -> bool:
        return self.tile_number == 1

    def __str__(self) -> str:
        return f"{self.side.name}:PP{self.position:02d}TT{self.tile_number:02d}"


def encode(position: int, tile_number: int, side: int) -> int:
    """Pack (position, tile number, side) into the signed unique ID."""
    return TileID(position, tile_number, side).unique_id


def decode(unique_id: int) -> Tuple[int, int, Side]:
    """
    Split a unique ID into (position, tile number, side).

    The sign gives the side (+ west, - east), |uniqueID| // 100 the
    supersector position and |uniqueID| % 100 the tile number.
    """
    _check_integer("unique ID", unique_id)
    if unique_id == 0:
        raise InvalidTileID("unique ID 0 does not name a tile", unique_id)
    side = Side.WEST if unique_id > 0 else Side.EAST
    position, tile_number = divmod(abs(int(unique_id)), 100)
    _check_range("position", position, 1, N_POSITIONS)
    _check_range("tile number", tile_number, 1, N_TILES)
    return position, tile_number, side


TileLike = Union[TileID, int, Tuple[int, int, int]]


def resolve_tile(*args) -> TileID:
    """
    Normalise any supported addressing form to a TileID.

    Accepts a TileID, a packed unique ID, a (position, tile, side) sequence,
    or position, tile and side as three separate arguments.
    """
    if len(args) == 3:
        return TileID(*args)
    if len(args) != 1:
        raise TypeError(f"expected a tile ID or (position, tile, side), got {len(args)} arguments")
    tile = args[0]
    if isinstance(tile, TileID):
        return tile
    if isinstance(tile, (tuple, list)):
        if len(tile) != 3:
            raise TypeError(f"a tile triple needs 3 values, got {len(tile)}")
        return TileID(*tile)
    if isinstance(tile, numbers.Integral) and not isinstance(tile, bool):
        return TileID.from_unique_id(tile)
    raise TypeError(f"cannot interpret {tile!r} as a tile")


def all_tiles(side: Optional[int] = None) -> Iterator[TileID]:
    """Every tile, east wheel first, then by position and tile number."""
    sides = (Side.EAST, Side.WEST) if side is None else (Side.parse(side),)
    for s in sides:
        for position in range(1, N_POSITIONS + 1):
            for tile_number in range(1, N_TILES + 1):
                yield TileID(position, tile_number, s)
