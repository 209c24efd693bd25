"""
Tests for geometry module (tables, shapes, centre, corners, containment).
"""
import math

import numpy as np
import pytest

from epdgeom.epd_geometry import (
    ROW_RMAX, ROW_RMIN, Z_WHEEL,
    AnnulusSector, Pentagon, Quadrilateral,
    area_weighted_radius, corners, is_in_tile, locate_tile, phi_center,
    points_in_polygon, pseudorapidity, radial_bounds, supersector_phi,
    tile_center, tile_shape, z_wheel,
)
from epdgeom.epd_tiles import Side, TileID


def _shoelace(xs, ys):
    return 0.5 * np.sum(xs * np.roll(ys, -1) - np.roll(xs, -1) * ys)


class TestTables:
    """Test cases for the wheel constants."""

    def test_wheel_z_mirrored(self):
        """West at +375 cm, east at -375 cm."""
        assert z_wheel(Side.WEST) == Z_WHEEL == 375.0
        assert z_wheel(-1) == -375.0

    def test_radial_table(self):
        """Rows start at 4.6 cm, are contiguous, increasing and non-empty."""
        assert ROW_RMIN[0] == pytest.approx(4.6)
        assert ROW_RMAX[0] == pytest.approx(9.0)
        assert ROW_RMAX[2] == pytest.approx(17.8)
        assert ROW_RMAX[15] == pytest.approx(89.69)
        assert np.all(ROW_RMIN < ROW_RMAX)
        assert np.allclose(ROW_RMIN[1:], ROW_RMAX[:-1])

    def test_radial_bounds_by_row(self, west_tile):
        """Tile 5 lies in row 3."""
        assert radial_bounds(west_tile) == pytest.approx((13.4, 17.8))

    def test_area_weighted_radius(self):
        """Lies between the bounds and beyond the arithmetic mean."""
        r = area_weighted_radius(4.6, 9.0)
        assert 6.8 < r < 9.0
        assert r == pytest.approx((2.0 / 3.0) * (9.0 ** 3 - 4.6 ** 3) / (9.0 ** 2 - 4.6 ** 2))


class TestPhi:
    """Test cases for azimuthal placement."""

    def test_supersector_centres(self):
        """West runs clockwise from 12 o'clock, east counter-clockwise."""
        assert math.degrees(supersector_phi(1, 1)) == pytest.approx(75.0)
        assert math.degrees(supersector_phi(2, 1)) == pytest.approx(45.0)
        assert math.degrees(supersector_phi(4, 1)) == pytest.approx(345.0)
        assert math.degrees(supersector_phi(1, -1)) == pytest.approx(105.0)
        assert math.degrees(supersector_phi(12, -1)) == pytest.approx(75.0)

    def test_tile_offsets(self):
        """Odd tiles sit at larger phi on the west wheel, smaller on the east."""
        assert math.degrees(phi_center(TileID(1, 5, 1))) == pytest.approx(82.5)
        assert math.degrees(phi_center(TileID(1, 4, 1))) == pytest.approx(67.5)
        assert math.degrees(phi_center(TileID(1, 5, -1))) == pytest.approx(97.5)
        assert math.degrees(phi_center(TileID(1, 1, -1))) == pytest.approx(105.0)

    def test_wrapped(self, every_tile):
        """phi_center is always in [0, 2pi)."""
        for tile in every_tile:
            assert 0.0 <= phi_center(tile) < 2.0 * math.pi

    def test_wheel_fully_tiled_in_phi(self):
        """The 24 tiles of one row on one wheel have distinct, evenly spaced centres."""
        phis = sorted(phi_center(TileID(p, t, 1)) for p in range(1, 13) for t in (8, 9))
        gaps = np.diff(phis)
        assert np.allclose(gaps, 2.0 * math.pi / 24)


class TestShapes:
    """Test cases for the tagged shape variants."""

    def test_variant_by_row(self, west_tile, pentagon_tile):
        """Tile 1 is a pentagon, everything else a quadrilateral."""
        assert isinstance(tile_shape(pentagon_tile), Pentagon)
        assert isinstance(tile_shape(west_tile), Quadrilateral)
        assert tile_shape(pentagon_tile).kind == "pentagon"

    def test_pentagon_halves(self, pentagon_tile):
        """The two halves meet on the bisector and share radial bounds."""
        shape = tile_shape(pentagon_tile)
        assert shape.lower.phi_hi == pytest.approx(shape.upper.phi_lo)
        assert shape.lower.r_min == shape.upper.r_min
        assert shape.lower.area == pytest.approx(shape.upper.area)
        assert shape.phi_center == pytest.approx(phi_center(pentagon_tile))

    def test_sector_area(self):
        """Area of a quarter annulus."""
        sector = AnnulusSector(1.0, 2.0, 0.0, math.pi / 4)
        assert sector.area == pytest.approx(math.pi * 3.0 / 4.0)

    def test_sector_contains_wraps(self):
        """A sector straddling phi = 0 contains points on both sides of the x axis."""
        sector = AnnulusSector(1.0, 2.0, 0.0, 0.2)
        x = np.array([1.5, 1.5, 1.5, 1.5])
        y = np.array([0.1, -0.1, 0.5, 0.0])
        assert sector.contains(x, y).tolist() == [True, True, False, True]


class TestCenter:
    """Test cases for tile_center."""

    def test_center_values(self, west_tile):
        """Centre at the area-weighted radius on the tile bisector."""
        x, y, z = tile_center(west_tile)
        r_mid = area_weighted_radius(13.4, 17.8)
        assert math.hypot(x, y) == pytest.approx(r_mid)
        assert math.degrees(math.atan2(y, x)) == pytest.approx(82.5)
        assert z == 375.0

    def test_center_inside_tile(self, every_tile):
        """Every tile contains its own centre."""
        for tile in every_tile:
            x, y, _ = tile_center(tile)
            assert is_in_tile(tile, x, y)

    def test_center_in_exactly_one_tile(self, every_tile):
        """No other tile of the same wheel claims a tile's centre."""
        for tile in every_tile[::17]:
            x, y, _ = tile_center(tile)
            assert locate_tile(x, y, tile.side) == tile


class TestCorners:
    """Test cases for corner enumeration."""

    def test_corner_counts(self, every_tile):
        """Five corners for tile 1, four otherwise."""
        for tile in every_tile:
            n, xs, ys = corners(tile)
            assert n == (5 if tile.tile_number == 1 else 4)
            assert len(xs) == len(ys) == n

    def test_corners_on_bounds(self, west_tile):
        """Corners lie on the inner and outer radius."""
        _, xs, ys = corners(west_tile)
        radii = np.hypot(xs, ys)
        assert np.allclose(sorted(radii), [13.4, 13.4, 17.8, 17.8])

    def test_pentagon_inner_edge_split(self, pentagon_tile):
        """The fifth corner sits on the inner radius at the bisector."""
        _, xs, ys = corners(pentagon_tile)
        assert math.hypot(xs[4], ys[4]) == pytest.approx(4.6)
        assert math.atan2(ys[4], xs[4]) % (2 * math.pi) == pytest.approx(phi_center(pentagon_tile))

    def test_counter_clockwise(self, every_tile):
        """Signed polygon area is positive for every tile."""
        for tile in every_tile:
            _, xs, ys = corners(tile)
            assert _shoelace(xs, ys) > 0

    def test_center_enclosed_by_polygon(self, every_tile):
        """The centre lies strictly inside the corner polygon."""
        for tile in every_tile:
            _, xs, ys = corners(tile)
            x, y, _ = tile_center(tile)
            assert points_in_polygon(xs, ys, x, y)


class TestIsInTile:
    """Test cases for is_in_tile and locate_tile."""

    def test_outside_radially(self, west_tile):
        """Points just inside Rmin or beyond Rmax are rejected."""
        phi = phi_center(west_tile)
        for r in (13.3, 17.9):
            assert not is_in_tile(west_tile, r * math.cos(phi), r * math.sin(phi))

    def test_outside_in_phi(self, west_tile):
        """The neighbouring tile of the same row does not count."""
        x, y, _ = tile_center(TileID(1, 4, 1))
        assert not is_in_tile(west_tile, x, y)

    def test_vectorised(self, east_tile):
        """Array input yields a boolean array."""
        x, y, _ = tile_center(east_tile)
        result = is_in_tile(east_tile, np.array([x, -x, 0.0]), np.array([y, -y, 0.0]))
        assert result.dtype == bool
        assert result.tolist() == [True, False, False]

    def test_scalar_returns_bool(self, east_tile):
        """Scalar input yields a plain bool."""
        assert is_in_tile(east_tile, 0.0, 0.0) is False

    def test_pentagon_both_halves(self, pentagon_tile):
        """Points on either side of the bisector are inside the pentagon."""
        phi = phi_center(pentagon_tile)
        r = 6.0
        for dphi in (-0.2, 0.2):
            assert is_in_tile(pentagon_tile, r * math.cos(phi + dphi), r * math.sin(phi + dphi))
        assert not is_in_tile(pentagon_tile, r * math.cos(phi + 0.3), r * math.sin(phi + 0.3))

    def test_locate_misses(self):
        """The beam hole and the region beyond the last row are not on any tile."""
        assert locate_tile(0.0, 1.0, 1) is None
        assert locate_tile(100.0, 0.0, -1) is None


class TestPolygon:
    """Test cases for points_in_polygon."""

    def test_unit_square(self):
        """Simple inside/outside cases."""
        xs = np.array([0.0, 1.0, 1.0, 0.0])
        ys = np.array([0.0, 0.0, 1.0, 1.0])
        assert points_in_polygon(xs, ys, 0.5, 0.5)
        assert not points_in_polygon(xs, ys, 1.5, 0.5)
        result = points_in_polygon(xs, ys, np.array([0.25, -0.1]), np.array([0.75, 0.5]))
        assert result.tolist() == [True, False]


class TestPseudorapidity:
    """Test cases for pseudorapidity."""

    def test_sign_follows_side(self, west_tile, east_tile):
        """West tiles are forward, east tiles backward."""
        assert pseudorapidity(*tile_center(west_tile)) > 0
        assert pseudorapidity(*tile_center(east_tile)) < 0

    def test_acceptance(self):
        """The wheel spans roughly 2.1 < |eta| < 5.1 for a central vertex."""
        assert pseudorapidity(ROW_RMAX[-1], 0.0, 375.0) == pytest.approx(2.14, abs=0.01)
        assert pseudorapidity(ROW_RMIN[0], 0.0, 375.0) == pytest.approx(5.09, abs=0.01)

    def test_vertex_shift(self):
        """Moving the vertex towards the wheel lowers eta."""
        assert pseudorapidity(10.0, 0.0, 375.0, vz=50.0) < pseudorapidity(10.0, 0.0, 375.0)
