# ------------------------------
# Tile Geometry Engine
# ------------------------------

import numbers
import threading
from typing import Optional, Tuple

import numpy as np

from epdgeom import epd_geometry as geom
from epdgeom.epd_logging import get_logger
from epdgeom.epd_tiles import Side, TileID, TileLike, decode, encode, resolve_tile


class TileGeometryEngine:
    """
    Geometry queries for EPD tiles.

    Every query takes the tile as a parameter: a TileID, a packed unique ID
    (sign*(100*PP+TT), + for west), or position, tile number and side as
    three arguments, e.g. ``engine.tile_center(105)`` or
    ``engine.tile_center(1, 5, +1)``.

    Only random sampling touches mutable state: the engine owns one numpy
    Generator and serialises access to it, so one engine can be shared
    between threads. For independent streams give each thread its own
    engine (and seed).
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.Generator] = None):
        self.logger = get_logger()
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._rng_lock = threading.Lock()
        self.logger.debug(f"TileGeometryEngine created (seed={seed})")

    # identity
    @staticmethod
    def decode(unique_id: int) -> Tuple[int, int, Side]:
        return decode(unique_id)

    @staticmethod
    def encode(position: int, tile_number: int, side: int) -> int:
        return encode(position, tile_number, side)

    @staticmethod
    def tile(*tile) -> TileID:
        return resolve_tile(*tile)

    def row(self, *tile) -> int:
        return resolve_tile(*tile).row

    def is_west(self, *tile) -> bool:
        return resolve_tile(*tile).is_west

    def is_east(self, *tile) -> bool:
        return resolve_tile(*tile).is_east

    # placement
    def z_wheel(self, side: int) -> float:
        return geom.z_wheel(side)

    def phi_center(self, *tile) -> float:
        return geom.phi_center(resolve_tile(*tile))

    def radial_bounds(self, *tile) -> Tuple[float, float]:
        return geom.radial_bounds(resolve_tile(*tile))

    def tile_center(self, *tile) -> np.ndarray:
        return geom.tile_center(resolve_tile(*tile))

    def shape(self, *tile) -> geom.TileShape:
        return geom.tile_shape(resolve_tile(*tile))

    def corners(self, *tile) -> Tuple[int, np.ndarray, np.ndarray]:
        return geom.corners(resolve_tile(*tile))

    def is_in_tile(self, *args):
        """is_in_tile(tile, x, y) or is_in_tile(position, tile_number, side, x, y)"""
        if len(args) < 3:
            raise TypeError("is_in_tile needs a tile and an (x, y) point")
        *tile, x, y = args
        return geom.is_in_tile(resolve_tile(*tile), x, y)

    def locate(self, x: float, y: float, side: int) -> Optional[TileID]:
        return geom.locate_tile(x, y, side)

    # sampling
    def random_points_on_tile(self, tile: TileLike, n: int) -> np.ndarray:
        """(n, 3) array of points drawn uniformly over the tile's area."""
        tile = resolve_tile(tile)
        if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 0:
            raise ValueError(f"n must be a non-negative integer, got {n!r}")
        shape = geom.tile_shape(tile)
        with self._rng_lock:
            r, phi = shape.sample_polar(self._rng, int(n))
        self.logger.debug(f"Drew {n} points on tile {tile}")
        z = np.full(len(r), geom.z_wheel(tile.side))
        return np.column_stack([r * np.cos(phi), r * np.sin(phi), z])

    def random_point_on_tile(self, *tile) -> np.ndarray:
        return self.random_points_on_tile(resolve_tile(*tile), 1)[0]
