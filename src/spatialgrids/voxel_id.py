"""
Voxel indexing utilities.

Maps point coordinates to integer voxel ids by per-axis floor division.
"""

import math
import numbers
import operator

import numpy as np
from typing import Sequence, Tuple, Union

VoxelId = Tuple[int, int, int]
VoxelSizeLike = Union[float, Sequence[float], np.ndarray]

_ID_MIN = float(np.iinfo(np.int64).min)
_ID_MAX = float(np.iinfo(np.int64).max)


def get_voxel_size(voxel_size: VoxelSizeLike) -> Tuple[float, float, float]:
    """
    Normalize a voxel size to a per-axis tuple.

    Args:
        voxel_size: A scalar (same size on every axis), or a 3-tuple / 3-vector
            with one size per axis.

    Returns:
        (sx, sy, sz) as floats.
    """
    if isinstance(voxel_size, numbers.Real):
        sizes = (float(voxel_size),) * 3
    else:
        arr = np.asarray(voxel_size, dtype=float)
        if arr.ndim == 0:
            sizes = (float(arr),) * 3
        elif arr.shape != (3,):
            raise ValueError("voxel_size must be a scalar or contain three values")
        else:
            sizes = tuple(float(s) for s in arr)
    if not all(math.isfinite(s) for s in sizes):
        raise ValueError("voxel_size contains NaN or infinite values")
    if any(s <= 0.0 for s in sizes):
        raise ValueError("voxel_size must contain positive values")
    return sizes


def as_points(points) -> np.ndarray:
    """
    Coerce a point collection to an (n_points, 3) float array.

    Accepts an (n_points, 3) array, a sequence of 3-component vectors, or a
    flat array of length 3 * n_points.
    """
    arr = np.asarray(points, dtype=float)
    if arr.ndim == 1:
        if arr.size % 3 != 0:
            raise ValueError("flat point arrays must have a length divisible by 3")
        arr = arr.reshape(-1, 3)
    elif arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"points must have shape (n_points, 3), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("points contains NaN or infinite values")
    return arr


def make_voxel_id(point: Sequence[float], voxel_size: Sequence[float]) -> VoxelId:
    """Voxel id of a single point, flooring towards negative infinity."""
    return (
        math.floor(point[0] / voxel_size[0]),
        math.floor(point[1] / voxel_size[1]),
        math.floor(point[2] / voxel_size[2]),
    )


def make_voxel_ids(points: np.ndarray, voxel_size: Sequence[float]) -> np.ndarray:
    """
    Voxel ids for every row of an (n_points, 3) array.

    Returns:
        Integer array of shape (n_points, 3).
    """
    size = np.asarray(voxel_size, dtype=float)
    floored = np.floor(points / size)
    # float(int64 max) rounds up to 2**63, which is already out of range
    if np.any(floored < _ID_MIN) or np.any(floored >= _ID_MAX):
        raise ValueError("points lie too far from the origin for 64-bit voxel ids at this voxel_size")
    return floored.astype(np.int64)


def as_voxel_id(voxel_id: Sequence[int]) -> VoxelId:
    """Coerce a sequence of three integers (tuple, list, int array) to a VoxelId."""
    ijk = tuple(operator.index(c) for c in voxel_id)
    if len(ijk) != 3:
        raise ValueError("voxel id must contain three integers")
    return ijk
