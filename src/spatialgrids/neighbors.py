"""
Cuboid neighbourhood search over a sparse voxel grid.

Finds the occupied voxels whose ids lie within a Chebyshev radius of a
reference voxel id. The reference id itself is never returned.

Two forms are provided:

    for voxel in in_cuboid(grid, (1, 1, 1), radius=1):
        indices = voxel.indices()

    in_cuboid_each(grid, (1, 1, 1), 1, lambda voxel: ...)
"""

import itertools
import operator

from typing import Callable, Iterator, Optional, Tuple, Union

from .sparse_voxels import SparseVoxelGrid, Voxel
from .voxel_id import VoxelId, as_voxel_id


def _center_id(center: Union[VoxelId, Voxel]) -> VoxelId:
    if isinstance(center, Voxel):
        return center.id
    return as_voxel_id(center)


def _check_radius(radius: int) -> int:
    radius = operator.index(radius)
    if radius < 0:
        raise ValueError("radius must be non-negative")
    return radius


def _cuboid_ids(center: VoxelId, radius: int) -> Iterator[VoxelId]:
    i, j, k = center
    return itertools.product(
        range(i - radius, i + radius + 1),
        range(j - radius, j + radius + 1),
        range(k - radius, k + radius + 1),
    )


def _next_voxel(
    grid: SparseVoxelGrid,
    center: VoxelId,
    candidates: Iterator[VoxelId],
) -> Optional[Voxel]:
    """Advance ``candidates`` to the next occupied id other than ``center``."""
    voxel_info = grid.voxel_info
    for voxel_id in candidates:
        if voxel_id != center and voxel_id in voxel_info:
            return Voxel(voxel_id, voxel_info[voxel_id], grid.point_indices)
    return None


class VoxelCuboid:
    """
    Iterator over the occupied voxels around a reference voxel id.

    Single pass: once exhausted, call :func:`in_cuboid` again to repeat the
    search.
    """

    __slots__ = ("grid", "voxel_id", "radius", "_candidates")

    def __init__(self, grid: SparseVoxelGrid, voxel_id: Union[VoxelId, Voxel], radius: int) -> None:
        self.grid = grid
        self.voxel_id = _center_id(voxel_id)
        self.radius = _check_radius(radius)
        self._candidates = _cuboid_ids(self.voxel_id, self.radius)

    def __iter__(self) -> "VoxelCuboid":
        return self

    def __next__(self) -> Voxel:
        voxel = _next_voxel(self.grid, self.voxel_id, self._candidates)
        if voxel is None:
            raise StopIteration
        return voxel

    def bounds(self) -> Tuple[VoxelId, VoxelId]:
        """First and last voxel id of the searched cuboid."""
        i, j, k = self.voxel_id
        r = self.radius
        return (i - r, j - r, k - r), (i + r, j + r, k + r)

    def __repr__(self) -> str:
        start, stop = self.bounds()
        return f"{type(self).__name__} ID iteration range: {start} -> {stop}"


def in_cuboid(
    grid: SparseVoxelGrid,
    center: Union[VoxelId, Voxel],
    radius: int,
) -> VoxelCuboid:
    """
    Search for neighbouring voxels within ``radius`` of ``center``.

    Args:
        grid: Grid to search.
        center: Reference voxel id, or a Voxel whose id is used. Does not
            need to be occupied.
        radius: Non-negative Chebyshev radius in voxels.

    Returns:
        VoxelCuboid yielding each occupied neighbouring Voxel once.
    """
    return VoxelCuboid(grid, center, radius)


def in_cuboid_each(
    grid: SparseVoxelGrid,
    center: Union[VoxelId, Voxel],
    radius: int,
    visit: Callable[[Voxel], None],
) -> None:
    """Call ``visit`` on every voxel :func:`in_cuboid` would yield."""
    center_id = _center_id(center)
    candidates = _cuboid_ids(center_id, _check_radius(radius))
    while True:
        voxel = _next_voxel(grid, center_id, candidates)
        if voxel is None:
            break
        visit(voxel)
