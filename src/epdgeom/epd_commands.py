# ------------------------------
# Command Handler Architecture
# ------------------------------

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import argparse
import json
import os

import numpy as np
import pandas as pd

from epdgeom.epd_engine import TileGeometryEngine
from epdgeom.epd_geometry import pseudorapidity
from epdgeom.epd_logging import get_logger
from epdgeom.epd_tiles import Side, TileID, all_tiles


def _tile_record(engine: TileGeometryEngine, tile: TileID) -> Dict[str, Any]:
    r_min, r_max = engine.radial_bounds(tile)
    x, y, z = engine.tile_center(tile)
    return {
        "id": tile.unique_id,
        "position": tile.position,
        "tile": tile.tile_number,
        "side": int(tile.side),
        "row": tile.row,
        "r_min": r_min,
        "r_max": r_max,
        "phi_center": engine.phi_center(tile),
        "x": float(x),
        "y": float(y),
        "z": float(z),
        "n_corners": engine.shape(tile).n_corners,
    }


class BaseCommand(ABC):
    """Abstract base class for all commands"""

    # fields that must be set after the config overlay
    required: List[str] = []

    def __init__(self):
        self.logger = get_logger()

    @abstractmethod
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add command-specific arguments"""
        pass

    @abstractmethod
    def execute(self, args: argparse.Namespace) -> None:
        """Execute the command"""
        pass

    def _make_engine(self, args: argparse.Namespace) -> TileGeometryEngine:
        return TileGeometryEngine(seed=getattr(args, "seed", None))

    def _emit(self, payload: Dict[str, Any]) -> None:
        print(json.dumps(payload, indent=2))

    def _create_output_dir(self, out_path: str) -> None:
        """Create the directory holding out_path if it doesn't exist"""
        folder = os.path.dirname(os.path.abspath(out_path))
        os.makedirs(folder, exist_ok=True)

    def _write_frame(self, df: pd.DataFrame, out_path: Optional[str]) -> None:
        if out_path:
            self._create_output_dir(out_path)
            df.to_csv(out_path, index=False)
            self.logger.info(f"Wrote {len(df)} rows to {out_path}")
        else:
            print(df.to_string(index=False))


class CenterCommand(BaseCommand):
    """Centre, row and radial extent of one tile"""

    required = ["tile"]

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--tile", default=None, help="Unique ID (e.g. -203) or 'PP,TT,EW'")

    def execute(self, args: argparse.Namespace) -> None:
        engine = self._make_engine(args)
        self._emit(_tile_record(engine, args.tile))


class CornersCommand(BaseCommand):
    """Corner polygon of one tile"""

    required = ["tile"]

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--tile", default=None, help="Unique ID (e.g. -203) or 'PP,TT,EW'")

    def execute(self, args: argparse.Namespace) -> None:
        engine = self._make_engine(args)
        n, xs, ys = engine.corners(args.tile)
        self._emit({
            "id": args.tile.unique_id,
            "kind": engine.shape(args.tile).kind,
            "n_corners": n,
            "x": xs.tolist(),
            "y": ys.tolist(),
            "z": engine.z_wheel(args.tile.side),
        })


class ContainsCommand(BaseCommand):
    """Whether a wheel-plane point lies on a tile"""

    required = ["tile", "x", "y"]

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--tile", default=None, help="Unique ID (e.g. -203) or 'PP,TT,EW'")
        parser.add_argument("--x", type=float, default=None, help="x in the wheel plane [cm]")
        parser.add_argument("--y", type=float, default=None, help="y in the wheel plane [cm]")

    def execute(self, args: argparse.Namespace) -> None:
        engine = self._make_engine(args)
        inside = engine.is_in_tile(args.tile, float(args.x), float(args.y))
        self._emit({"id": args.tile.unique_id, "x": args.x, "y": args.y, "inside": inside})


class LocateCommand(BaseCommand):
    """Which tile of a wheel contains a point"""

    required = ["x", "y", "side"]

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--x", type=float, default=None, help="x in the wheel plane [cm]")
        parser.add_argument("--y", type=float, default=None, help="y in the wheel plane [cm]")
        parser.add_argument("--side", default=None, help="east/west or -1/+1")

    def execute(self, args: argparse.Namespace) -> None:
        engine = self._make_engine(args)
        side = Side.parse(args.side)
        tile = engine.locate(float(args.x), float(args.y), side)
        if tile is None:
            self.logger.warning(f"({args.x}, {args.y}) is not on the {side.name.lower()} wheel")
        self._emit({"x": args.x, "y": args.y, "side": int(side),
                    "id": tile.unique_id if tile is not None else None})


class SampleCommand(BaseCommand):
    """Area-uniform random points on a tile, with their pseudorapidity"""

    required = ["tile"]

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--tile", default=None, help="Unique ID (e.g. -203) or 'PP,TT,EW'")
        parser.add_argument("--n", type=int, default=1000, help="Number of points")
        parser.add_argument("--seed", type=int, default=None, help="Random seed")
        parser.add_argument("--vz", type=float, default=0.0, help="Vertex z for eta [cm]")
        parser.add_argument("--out", default=None, help="CSV output path")

    def execute(self, args: argparse.Namespace) -> None:
        engine = self._make_engine(args)
        with self.logger.operation("sample", tile=args.tile, n=args.n, seed=getattr(args, "seed", None)):
            points = engine.random_points_on_tile(args.tile, int(args.n))
        df = pd.DataFrame(points, columns=["x", "y", "z"])
        df["r"] = np.hypot(df["x"], df["y"])
        df["phi"] = np.mod(np.arctan2(df["y"], df["x"]), 2.0 * np.pi)
        df["eta"] = pseudorapidity(df["x"].to_numpy(), df["y"].to_numpy(), df["z"].to_numpy(), vz=float(args.vz))
        if args.out:
            self._write_frame(df, args.out)
        else:
            self.logger.info(
                f"tile {args.tile}: r in [{df['r'].min():.3f}, {df['r'].max():.3f}] cm, "
                f"eta in [{df['eta'].min():.3f}, {df['eta'].max():.3f}], mean eta {df['eta'].mean():.3f}"
            )


class TableCommand(BaseCommand):
    """Summary of every tile (optionally one wheel)"""

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--side", default=None, help="east/west or -1/+1 (default: both)")
        parser.add_argument("--out", default=None, help="CSV output path")

    def execute(self, args: argparse.Namespace) -> None:
        engine = self._make_engine(args)
        with self.logger.operation("table", side=args.side):
            df = pd.DataFrame([_tile_record(engine, t) for t in all_tiles(args.side)])
        self._write_frame(df, args.out)


COMMANDS = {
    "center": CenterCommand,
    "corners": CornersCommand,
    "contains": ContainsCommand,
    "locate": LocateCommand,
    "sample": SampleCommand,
    "table": TableCommand,
}
