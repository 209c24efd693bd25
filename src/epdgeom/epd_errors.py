# ------------------------------
# Error Types
# ------------------------------


class EPDGeometryError(Exception):
    """Base class for all errors raised by epdgeom"""


class InvalidTileID(EPDGeometryError, ValueError):
    """Raised when a tile identity (position, tile number, side or unique ID) is out of range"""

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value
