"""
Tests for neighbors.py
"""

import numpy as np
import pytest

from spatialgrids.neighbors import VoxelCuboid, in_cuboid, in_cuboid_each
from spatialgrids.sparse_voxels import SparseVoxelGrid


def brute_force(grid, center, radius):
    return sorted(
        vid for vid in grid.voxel_info
        if vid != center and max(abs(a - b) for a, b in zip(vid, center)) <= radius
    )


def test_neighbors_exist_in_grid(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 2.0)
    for voxel in grid:
        seen = []
        in_cuboid_each(grid, voxel, 1, seen.append)
        assert seen
        for neighbor in seen:
            assert neighbor.id in grid
            assert neighbor.id != voxel.id


def test_lattice_neighbor_counts(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    assert len(list(in_cuboid(grid, (1, 1, 1), 2))) == 26
    assert len(list(in_cuboid(grid, (1, 2, 1), 2))) == 26
    assert len(list(in_cuboid(grid, (2, 2, 2), 2))) == 26
    assert len(list(in_cuboid(grid, (10, 10, 10), 2))) == 0
    assert len(list(in_cuboid(grid, next(iter(grid)), 2))) == 26


def test_radius_zero_is_empty(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    assert list(in_cuboid(grid, (1, 1, 1), 0)) == []
    assert list(in_cuboid(grid, (5, 5, 5), 0)) == []
    seen = []
    in_cuboid_each(grid, (1, 1, 1), 0, seen.append)
    assert seen == []


def test_matches_brute_force_on_random_cloud():
    rng = np.random.default_rng(3)
    points = rng.uniform(-4.0, 4.0, size=(150, 3))
    grid = SparseVoxelGrid(points, 1.0)
    for center in [(0, 0, 0), (-4, 3, 1), (2, -1, -3), (9, 9, 9)]:
        for radius in range(4):
            found = sorted(v.id for v in in_cuboid(grid, center, radius))
            assert found == brute_force(grid, center, radius)


def test_radius_monotonicity():
    rng = np.random.default_rng(11)
    points = rng.uniform(0.0, 6.0, size=(120, 3))
    grid = SparseVoxelGrid(points, 1.0)
    center = (3, 3, 3)
    previous = set()
    for radius in range(5):
        current = {v.id for v in in_cuboid(grid, center, radius)}
        assert previous <= current
        previous = current


def test_callback_and_iterator_agree():
    rng = np.random.default_rng(5)
    points = rng.uniform(-2.0, 2.0, size=(80, 3))
    grid = SparseVoxelGrid(points, 0.5)
    for voxel in grid:
        pulled = [v.id for v in in_cuboid(grid, voxel, 2)]
        pushed = []
        in_cuboid_each(grid, voxel, 2, lambda v: pushed.append(v.id))
        assert pulled == pushed


def test_cuboid_is_single_pass(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    cuboid = in_cuboid(grid, (1, 1, 1), 1)
    assert isinstance(cuboid, VoxelCuboid)
    assert len(list(cuboid)) == 26
    assert list(cuboid) == []
    assert len(list(in_cuboid(grid, (1, 1, 1), 1))) == 26


def test_yielded_voxels_are_views(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    for voxel in in_cuboid(grid, (0, 0, 0), 1):
        assert voxel == grid[voxel.id]
        assert list(voxel) == list(grid[voxel.id])


def test_grid_shortcut(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    ids = {v.id for v in grid.in_cuboid((0, 0, 0), 1)}
    assert ids == {v.id for v in in_cuboid(grid, (0, 0, 0), 1)}
    assert len(ids) == 7


def test_invalid_arguments(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    with pytest.raises(ValueError):
        in_cuboid(grid, (0, 0, 0), -1)
    with pytest.raises(TypeError):
        in_cuboid(grid, (0, 0, 0), 1.5)
    with pytest.raises(ValueError):
        in_cuboid(grid, (0, 0), 1)
    with pytest.raises(ValueError):
        in_cuboid_each(grid, (0, 0, 0), -2, lambda v: None)


def test_repr(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    cuboid = in_cuboid(grid, (0, 0, 0), 1)
    assert repr(cuboid) == "VoxelCuboid ID iteration range: (-1, -1, -1) -> (1, 1, 1)"


def test_cuboid_constructor_normalizes_center(lattice_points):
    grid = SparseVoxelGrid(lattice_points, 1.5)
    expected = sorted(v.id for v in in_cuboid(grid, (0, 0, 0), 1))
    for center in ([0, 0, 0], np.array([0, 0, 0]), grid[(0, 0, 0)]):
        ids = sorted(v.id for v in VoxelCuboid(grid, center, 1))
        assert (0, 0, 0) not in ids
        assert ids == expected
    with pytest.raises(ValueError):
        VoxelCuboid(grid, (0, 0, 0), -1)
