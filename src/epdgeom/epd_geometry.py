# Geometry helpers
#
# STAR coordinates: z along the beam, the West wheel at +z and the East wheel
# at -z. Lengths are in cm, angles in radians.

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple, Union

import numpy as np

from epdgeom.epd_tiles import N_POSITIONS, N_ROWS, Side, TileID

Z_WHEEL = 375.0
R_INNER = 4.6
ROW_HEIGHTS = np.array([4.4] * 3 + [5.53] * (N_ROWS - 3))
ROW_RMIN = R_INNER + np.concatenate(([0.0], np.cumsum(ROW_HEIGHTS)[:-1]))
ROW_RMAX = ROW_RMIN + ROW_HEIGHTS

TWO_PI = 2.0 * np.pi
SUPERSECTOR_WIDTH = TWO_PI / N_POSITIONS
# boundary slack for points that are on an edge up to rounding
EDGE_TOL = 1e-9


def _wrap_phi(phi: float) -> float:
    """Map an angle into [0, 2pi)."""
    out = float(np.mod(phi, TWO_PI))
    # mod can round a tiny negative angle up to exactly 2pi
    return 0.0 if out >= TWO_PI else out


@dataclass(frozen=True)
class AnnulusSector:
    r_min: float
    r_max: float
    phi_center: float
    half_width: float

    @property
    def phi_lo(self) -> float:
        return self.phi_center - self.half_width

    @property
    def phi_hi(self) -> float:
        return self.phi_center + self.half_width

    @property
    def area(self) -> float:
        return self.half_width * (self.r_max ** 2 - self.r_min ** 2)

    def contains(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        r = np.hypot(x, y)
        dphi = np.mod(np.arctan2(y, x) - self.phi_center + np.pi, TWO_PI) - np.pi
        return ((r >= self.r_min - EDGE_TOL) & (r <= self.r_max + EDGE_TOL)
                & (np.abs(dphi) <= self.half_width + EDGE_TOL))

    def sample_polar(self, rng: np.random.Generator, n: int) -> Tuple[np.ndarray, np.ndarray]:
        """Area-uniform (r, phi): inverse CDF in r, flat in phi."""
        u = rng.random(n)
        r = np.sqrt(self.r_min ** 2 + u * (self.r_max ** 2 - self.r_min ** 2))
        phi = rng.uniform(self.phi_lo, self.phi_hi, n)
        return r, phi


@dataclass(frozen=True)
class Quadrilateral:
    """Ordinary tile: one annulus sector, four corners"""
    sector: AnnulusSector
    kind: ClassVar[str] = "quadrilateral"
    n_corners: ClassVar[int] = 4

    @property
    def r_min(self) -> float:
        return self.sector.r_min

    @property
    def r_max(self) -> float:
        return self.sector.r_max

    @property
    def phi_center(self) -> float:
        return self.sector.phi_center

    @property
    def area(self) -> float:
        return self.sector.area

    def corner_polar(self) -> List[Tuple[float, float]]:
        s = self.sector
        return [(s.r_min, s.phi_lo), (s.r_max, s.phi_lo), (s.r_max, s.phi_hi), (s.r_min, s.phi_hi)]

    def contains(self, x, y):
        return self.sector.contains(x, y)

    def sample_polar(self, rng: np.random.Generator, n: int):
        return self.sector.sample_polar(rng, n)


@dataclass(frozen=True)
class Pentagon:
    """
    Row-1 tile. It covers the whole supersector and is split along its
    bisector into two half-sectors; the inner edge carries an extra corner
    where the halves meet.
    """
    lower: AnnulusSector
    upper: AnnulusSector
    kind: ClassVar[str] = "pentagon"
    n_corners: ClassVar[int] = 5

    @property
    def r_min(self) -> float:
        return self.lower.r_min

    @property
    def r_max(self) -> float:
        return self.lower.r_max

    @property
    def phi_center(self) -> float:
        return self.lower.phi_hi

    @property
    def area(self) -> float:
        return self.lower.area + self.upper.area

    def corner_polar(self) -> List[Tuple[float, float]]:
        lo, hi = self.lower, self.upper
        return [(lo.r_min, lo.phi_lo), (lo.r_max, lo.phi_lo),
                (hi.r_max, hi.phi_hi), (hi.r_min, hi.phi_hi),
                (hi.r_min, hi.phi_lo)]

    def contains(self, x, y):
        return self.lower.contains(x, y) | self.upper.contains(x, y)

    def sample_polar(self, rng: np.random.Generator, n: int):
        in_lower = rng.random(n) < self.lower.area / self.area
        r_lo, phi_lo = self.lower.sample_polar(rng, n)
        r_hi, phi_hi = self.upper.sample_polar(rng, n)
        return np.where(in_lower, r_lo, r_hi), np.where(in_lower, phi_lo, phi_hi)


TileShape = Union[Quadrilateral, Pentagon]


def z_wheel(side: int) -> float:
    return Z_WHEEL * int(Side.parse(side))


def supersector_phi(position: int, side: int) -> float:
    """Azimuth of the supersector centre. West counts clockwise from 12 o'clock, East mirrors it."""
    offset = (position - 0.5) * SUPERSECTOR_WIDTH
    if Side.parse(side) is Side.WEST:
        return _wrap_phi(np.pi / 2.0 - offset)
    return _wrap_phi(np.pi / 2.0 + offset)


def _half_sign(tile: TileID) -> int:
    # west: odd tiles sit at larger phi than the supersector centre; east is mirrored
    odd = tile.tile_number % 2 == 1
    if tile.is_east:
        odd = not odd
    return 1 if odd else -1


def phi_center(tile: TileID) -> float:
    phi_ss = supersector_phi(tile.position, tile.side)
    if tile.is_pentagon:
        return phi_ss
    return _wrap_phi(phi_ss + _half_sign(tile) * SUPERSECTOR_WIDTH / 4.0)


def radial_bounds(tile: TileID) -> Tuple[float, float]:
    i = tile.row - 1
    return float(ROW_RMIN[i]), float(ROW_RMAX[i])


def area_weighted_radius(r_min: float, r_max: float) -> float:
    """Area-weighted mean radius of an annulus: (2/3)(R2^3 - R1^3)/(R2^2 - R1^2)."""
    return (2.0 / 3.0) * (r_max ** 3 - r_min ** 3) / (r_max ** 2 - r_min ** 2)


def tile_shape(tile: TileID) -> TileShape:
    r_min, r_max = radial_bounds(tile)
    phi = phi_center(tile)
    if tile.is_pentagon:
        quarter = SUPERSECTOR_WIDTH / 4.0
        return Pentagon(lower=AnnulusSector(r_min, r_max, phi - quarter, quarter),
                        upper=AnnulusSector(r_min, r_max, phi + quarter, quarter))
    # two tiles per row share the supersector
    return Quadrilateral(AnnulusSector(r_min, r_max, phi, SUPERSECTOR_WIDTH / 4.0))


def tile_center(tile: TileID) -> np.ndarray:
    """Centre (x, y, z) at the area-weighted radius on the tile's bisector."""
    r_min, r_max = radial_bounds(tile)
    r_mid = area_weighted_radius(r_min, r_max)
    phi = phi_center(tile)
    return np.array([r_mid * np.cos(phi), r_mid * np.sin(phi), z_wheel(tile.side)])


def corners(tile: TileID) -> Tuple[int, np.ndarray, np.ndarray]:
    """(n, xs, ys) of the tile corners, counter-clockwise, in the wheel plane."""
    polar = np.array(tile_shape(tile).corner_polar())
    r, phi = polar[:, 0], polar[:, 1]
    return len(polar), r * np.cos(phi), r * np.sin(phi)


def is_in_tile(tile: TileID, x, y):
    """True where (x, y) lies on the tile. z is not consulted."""
    inside = tile_shape(tile).contains(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
    if np.ndim(inside) == 0:
        return bool(inside)
    return inside


def points_in_polygon(xs: np.ndarray, ys: np.ndarray, px, py):
    """Even-odd ray casting test of points (px, py) against the polygon (xs, ys)."""
    xs = np.asarray(xs, dtype=float)
    ys = np.asarray(ys, dtype=float)
    px = np.asarray(px, dtype=float)
    py = np.asarray(py, dtype=float)
    inside = np.zeros(np.broadcast(px, py).shape, dtype=bool)
    x_prev, y_prev = xs[-1], ys[-1]
    for x_cur, y_cur in zip(xs, ys):
        crosses = (y_cur > py) != (y_prev > py)
        with np.errstate(divide="ignore", invalid="ignore"):
            x_cross = x_cur + (py - y_cur) * (x_prev - x_cur) / (y_prev - y_cur)
        inside ^= crosses & (px < x_cross)
        x_prev, y_prev = x_cur, y_cur
    if inside.ndim == 0:
        return bool(inside)
    return inside


def locate_tile(x: float, y: float, side: int) -> Optional[TileID]:
    """The tile on the given wheel that contains (x, y), or None."""
    r = float(np.hypot(x, y))
    hits = np.nonzero((r >= ROW_RMIN - EDGE_TOL) & (r <= ROW_RMAX + EDGE_TOL))[0]
    if len(hits) == 0:
        return None
    row = int(hits[0]) + 1
    tile_numbers = (1,) if row == 1 else (2 * (row - 1), 2 * (row - 1) + 1)
    for position in range(1, N_POSITIONS + 1):
        for tile_number in tile_numbers:
            tile = TileID(position, tile_number, side)
            if is_in_tile(tile, x, y):
                return tile
    return None


def pseudorapidity(x, y, z, vz: float = 0.0):
    """eta = -ln tan(theta/2) of a point seen from a vertex on the beam axis at z = vz."""
    theta = np.arctan2(np.hypot(x, y), np.asarray(z, dtype=float) - vz)
    eta = -np.log(np.tan(theta / 2.0))
    if np.ndim(eta) == 0:
        return float(eta)
    return eta
