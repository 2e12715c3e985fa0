"""
2D rasterization of point clouds.

Buckets points into square cells in the xy plane.
"""

import logging
import math

import numpy as np
from collections.abc import Mapping
from typing import Dict, Iterator, List, Tuple

logger = logging.getLogger(__name__)

CellId = Tuple[int, int]


class Raster(Mapping):
    """
    Mapping of 2D cell id to the indices of the points in that cell.

    Attributes:
        pixels: dict of (i, j) cell id to list of point indices.
        r_min: Per-axis minimum of the input coordinates.
        r_max: Per-axis maximum of the input coordinates.
        cellsize: Cell side length.
    """

    def __init__(self, pixels: Dict[CellId, List[int]], r_min: np.ndarray, r_max: np.ndarray, cellsize: float):
        self.pixels = pixels
        self.r_min = r_min
        self.r_max = r_max
        self.cellsize = cellsize

    def __getitem__(self, cell_id: CellId) -> List[int]:
        return self.pixels[cell_id]

    def __iter__(self) -> Iterator[CellId]:
        return iter(self.pixels)

    def __len__(self) -> int:
        return len(self.pixels)

    def __repr__(self) -> str:
        n_points = sum(len(v) for v in self.pixels.values())
        return f"Raster with {len(self)} cells, {n_points} points, cellsize {self.cellsize}"


def rasterize_points(points, dx: float) -> Raster:
    """
    Rasterize points in 2D with square cells of side ``dx``.

    Cells are counted from the minimum x and y of the points.

    Args:
        points: (n_points, 2) or (n_points, 3) array, or a sequence of 2D/3D vectors.
        dx: Cell size.

    Returns:
        Raster with the point indices of each occupied cell, in input order.
    """
    arr = np.asarray(points, dtype=float)
    if arr.ndim != 2 or arr.shape[1] not in (2, 3):
        raise ValueError(f"points must have shape (n_points, 2) or (n_points, 3), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("points contains NaN or infinite values")
    if not (math.isfinite(dx) and dx > 0.0):
        raise ValueError("dx must be positive")

    pixels: Dict[CellId, List[int]] = {}
    if arr.shape[0] == 0:
        empty = np.zeros(arr.shape[1])
        return Raster(pixels, empty, empty.copy(), float(dx))

    r_min = arr.min(axis=0)
    r_max = arr.max(axis=0)
    keys = np.floor((arr[:, :2] - r_min[:2]) / dx).astype(np.int64)
    for i, key in enumerate(keys.tolist()):
        pixels.setdefault(tuple(key), []).append(i)

    logger.debug("Rasterized %d points into %d cells, dx=%s", arr.shape[0], len(pixels), dx)
    return Raster(pixels, r_min, r_max, float(dx))
