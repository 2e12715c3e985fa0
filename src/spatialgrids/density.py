"""
Occupancy and local density summaries of a sparse voxel grid.
"""

import numpy as np
from scipy import sparse
from typing import Dict, Tuple

from .neighbors import in_cuboid_each
from .sparse_voxels import SparseVoxelGrid
from .voxel_id import VoxelId


def voxel_point_counts(grid: SparseVoxelGrid) -> Tuple[np.ndarray, np.ndarray]:
    """
    Number of points in each occupied voxel.

    Returns:
        ids: Array of shape (n_voxels, 3) with voxel ids.
        counts: Array of shape (n_voxels,) with point counts.
        Rows follow grid iteration order.
    """
    ids = np.array(list(grid.voxel_info.keys()), dtype=np.int64).reshape(-1, 3)
    counts = np.array([len(r) for r in grid.voxel_info.values()], dtype=np.int64)
    return ids, counts


def membership_matrix(grid: SparseVoxelGrid) -> sparse.csr_matrix:
    """
    Build the voxel/point membership matrix B.

    B_vj = 1 if point j lies in voxel v, else 0. Row v is the v-th voxel in grid
    iteration order, so B @ values sums per-point values over each voxel.

    Returns:
        Sparse CSR matrix of shape (n_voxels, n_points).
    """
    n_voxels = len(grid)
    n_points = grid.n_points
    # point_indices is already grouped by voxel in iteration order
    indptr = np.zeros(n_voxels + 1, dtype=np.int64)
    for v, r in enumerate(grid.voxel_info.values()):
        indptr[v + 1] = r.stop
    indices = np.array(grid.point_indices, dtype=np.int64)
    data = np.ones(n_points, dtype=float)
    B = sparse.csr_matrix((data, indices, indptr), shape=(n_voxels, n_points))
    B.sort_indices()
    return B


def neighborhood_point_counts(
    grid: SparseVoxelGrid,
    radius: int,
    include_self: bool = True,
) -> Dict[VoxelId, int]:
    """
    Count points in the cuboid neighbourhood of every occupied voxel.

    Args:
        grid: SparseVoxelGrid.
        radius: Chebyshev radius in voxels.
        include_self: Also count the points of the voxel itself.

    Returns:
        dict of voxel id to point count.
    """
    counts: Dict[VoxelId, int] = {}
    for voxel in grid:
        sizes = [len(voxel)] if include_self else []
        in_cuboid_each(grid, voxel, radius, lambda neighbor: sizes.append(len(neighbor)))
        counts[voxel.id] = sum(sizes)
    return counts
