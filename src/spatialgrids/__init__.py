"""
SpatialGrids: sparse spatial grids for 3D point clouds.

Voxel grids with counting-sort construction and cuboid neighbourhood search,
plus a simple 2D rasterizer.
"""

from .voxel_id import VoxelId, get_voxel_size, make_voxel_id, make_voxel_ids, as_points, as_voxel_id
from .sparse_voxels import SparseVoxelGrid, Voxel, voxel_center
from .neighbors import VoxelCuboid, in_cuboid, in_cuboid_each
from .raster import Raster, rasterize_points
from .density import voxel_point_counts, membership_matrix, neighborhood_point_counts

__all__ = [
    "VoxelId",
    "get_voxel_size",
    "make_voxel_id",
    "make_voxel_ids",
    "as_points",
    "as_voxel_id",
    "SparseVoxelGrid",
    "Voxel",
    "voxel_center",
    "VoxelCuboid",
    "in_cuboid",
    "in_cuboid_each",
    "Raster",
    "rasterize_points",
    "voxel_point_counts",
    "membership_matrix",
    "neighborhood_point_counts",
]
