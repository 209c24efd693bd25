"""
epdgeom - Event Plane Detector tile geometry

Where each tile of the STAR EPD wheels sits, what shape it has, random points
drawn uniformly over its area, and whether a projected point hits it.
"""

__version__ = "0.1.0"

from epdgeom.epd_errors import EPDGeometryError, InvalidTileID

from epdgeom.epd_tiles import (
    Side,
    TileID,
    encode,
    decode,
    resolve_tile,
    row_of,
    all_tiles,
)

from epdgeom.epd_geometry import (
    AnnulusSector,
    Quadrilateral,
    Pentagon,
    tile_shape,
    tile_center,
    corners,
    is_in_tile,
    locate_tile,
    pseudorapidity,
)

from epdgeom.epd_engine import TileGeometryEngine

__all__ = [
    "EPDGeometryError",
    "InvalidTileID",
    "Side",
    "TileID",
    "encode",
    "decode",
    "resolve_tile",
    "row_of",
    "all_tiles",
    "AnnulusSector",
    "Quadrilateral",
    "Pentagon",
    "tile_shape",
    "tile_center",
    "corners",
    "is_in_tile",
    "locate_tile",
    "pseudorapidity",
    "TileGeometryEngine",
]
