"""
Shared pytest fixtures for epdgeom tests.
"""
import json
import os
import tempfile

import pytest
import yaml

from epdgeom.epd_engine import TileGeometryEngine
from epdgeom.epd_logging import get_logger
from epdgeom.epd_tiles import Side, TileID, all_tiles


@pytest.fixture
def engine():
    """A seeded engine so sampling tests are reproducible."""
    return TileGeometryEngine(seed=12345)


@pytest.fixture
def west_tile():
    """West wheel, supersector 1, tile 5 (unique ID 105)."""
    return TileID(1, 5, Side.WEST)


@pytest.fixture
def east_tile():
    """East wheel, supersector 2, tile 3 (unique ID -203)."""
    return TileID(2, 3, Side.EAST)


@pytest.fixture
def pentagon_tile():
    """Row-1 tile on the west wheel, supersector 7."""
    return TileID(7, 1, Side.WEST)


@pytest.fixture(scope="session")
def every_tile():
    """All 744 tiles of both wheels."""
    return list(all_tiles())


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def yaml_config(temp_dir):
    """A YAML config with defaults and a per-command section."""
    path = os.path.join(temp_dir, "epd.yaml")
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({
            "defaults": {"seed": 3, "log_level": "WARNING"},
            "sample": {"n": 250, "tile": "-203"},
        }, f)
    return path


@pytest.fixture
def json_config(temp_dir):
    """A JSON config with a per-command section."""
    path = os.path.join(temp_dir, "epd.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"center": {"tile": 105}}, f)
    return path


@pytest.fixture(autouse=True)
def restore_log_level():
    """Commands may change the package log level; put it back after each test."""
    logger = get_logger()
    level = logger.level
    yield
    logger.set_level(level)
