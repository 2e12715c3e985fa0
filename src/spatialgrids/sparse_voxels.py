"""
Sparse voxel grid for 3D point clouds.

Points are bucketed into uniformly sized voxels. The indices of all points are
packed into a single array, with each occupied voxel owning one contiguous
range of it.

Example:

    points = np.random.rand(100000, 3) * 20.0
    grid = SparseVoxelGrid(points, 10.0)
    for voxel in grid:
        for idx in voxel:
            ...  # points[idx]
        all_point_indices = voxel.indices()
"""

import logging

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Iterator, Sequence

from .voxel_id import (
    VoxelId,
    VoxelSizeLike,
    as_points,
    as_voxel_id,
    get_voxel_size,
    make_voxel_ids,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Voxel:
    """
    View of the point indices in one voxel.

    Attributes:
        id: Voxel id (i, j, k).
        point_index_range: Range of positions in the grid's point index array.
        all_point_indices: The grid's point index array. Not copied, so a voxel
            is only valid for as long as the grid it came from.
    """
    id: VoxelId
    point_index_range: range
    all_point_indices: np.ndarray = field(repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.point_index_range)

    def __iter__(self) -> Iterator[int]:
        return (int(i) for i in self.indices())

    def indices(self) -> np.ndarray:
        """Point indices in this voxel as a read-only array view."""
        r = self.point_index_range
        return self.all_point_indices[r.start:r.stop]

    def __repr__(self) -> str:
        return f"Voxel {self.id} with {len(self)} points"


class SparseVoxelGrid:
    """
    Sparse spatial grid organising 3D points into voxels.

    Args:
        points: (n_points, 3) array, sequence of 3-component vectors, or a
            flat array of length 3 * n_points.
        voxel_size: Scalar for cubic voxels, or (sx, sy, sz) per axis.

    Attributes:
        voxel_size: (sx, sy, sz) voxel side lengths.
        voxel_info: Mapping of voxel id to its range in point_indices.
        point_indices: Indices of all points, grouped by voxel.
    """

    def __init__(self, points, voxel_size: VoxelSizeLike):
        pts = as_points(points)
        self.voxel_size = get_voxel_size(voxel_size)
        self.voxel_info, self.point_indices = _build_index(pts, self.voxel_size)
        logger.debug(
            "Built sparse voxel grid: %d points in %d voxels, voxel_size=%s",
            len(self.point_indices), len(self.voxel_info), self.voxel_size,
        )

    @classmethod
    def from_matrix(cls, matrix, voxel_size: VoxelSizeLike) -> "SparseVoxelGrid":
        """Build from a (3, n_points) matrix with one point per column."""
        arr = np.asarray(matrix, dtype=float)
        if arr.ndim != 2 or arr.shape[0] != 3:
            raise ValueError(f"matrix must have shape (3, n_points), got {arr.shape}")
        return cls(arr.T, voxel_size)

    def __len__(self) -> int:
        return len(self.voxel_info)

    def is_empty(self) -> bool:
        return not self.voxel_info

    def __contains__(self, voxel_id) -> bool:
        return as_voxel_id(voxel_id) in self.voxel_info

    def __getitem__(self, voxel_id: Sequence[int]) -> Voxel:
        voxel_id = as_voxel_id(voxel_id)
        return Voxel(voxel_id, self.voxel_info[voxel_id], self.point_indices)

    def __iter__(self) -> Iterator[Voxel]:
        for voxel_id, point_index_range in self.voxel_info.items():
            yield Voxel(voxel_id, point_index_range, self.point_indices)

    @property
    def n_points(self) -> int:
        return len(self.point_indices)

    def voxel_center(self, voxel_id: Sequence[int]) -> np.ndarray:
        """Centre point of ``voxel_id``; the id does not have to be occupied."""
        size = np.asarray(self.voxel_size)
        return np.asarray(voxel_id, dtype=float) * size - 0.5 * size

    def voxel_centers(self) -> np.ndarray:
        """
        Centres of all occupied voxels.

        Returns:
            Array of shape (n_voxels, 3), rows in iteration order.
        """
        ids = np.array(list(self.voxel_info.keys()), dtype=float).reshape(-1, 3)
        size = np.asarray(self.voxel_size)
        return ids * size - 0.5 * size

    def in_cuboid(self, center, radius: int):
        """Shortcut for :func:`spatialgrids.neighbors.in_cuboid`."""
        from .neighbors import in_cuboid

        return in_cuboid(self, center, radius)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}\n"
            f"  Number of voxels: {len(self)}\n"
            f"  Number of points in grid: {self.n_points}\n"
            f"  Side length per dimension: {list(self.voxel_size)}"
        )


def _build_index(points: np.ndarray, voxel_size: Sequence[float]):
    """
    Counting sort of point indices by voxel id.

    Returns:
        voxel_info: dict of voxel id to range in point_indices.
        point_indices: Read-only int array of length n_points.
    """
    npoints = points.shape[0]

    # Assign each point to a voxel id
    voxel_ids = [tuple(row) for row in make_voxel_ids(points, voxel_size).tolist()]

    # Count points per voxel
    group_counts: Dict[VoxelId, int] = {}
    for voxel_id in voxel_ids:
        group_counts[voxel_id] = group_counts.get(voxel_id, 0) + 1

    # Allocate a contiguous range per voxel
    voxel_info: Dict[VoxelId, range] = {}
    current_index = 0
    for voxel_id, group_size in group_counts.items():
        voxel_info[voxel_id] = range(current_index, current_index + group_size)
        current_index += group_size

    # Scatter point indices into their ranges, back to front
    point_indices = np.empty(npoints, dtype=np.intp)
    for j, voxel_id in enumerate(voxel_ids):
        index_in_group = group_counts[voxel_id]
        group_counts[voxel_id] = index_in_group - 1
        point_indices[voxel_info[voxel_id].start + index_in_group - 1] = j

    point_indices.flags.writeable = False
    return voxel_info, point_indices


def voxel_center(grid: SparseVoxelGrid, voxel_id: Sequence[int]) -> np.ndarray:
    """Centre point of ``voxel_id`` in ``grid``."""
    return grid.voxel_center(voxel_id)
