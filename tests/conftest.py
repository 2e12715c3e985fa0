"""Shared fixtures for the spatialgrids tests."""

import numpy as np
import pytest


def _lattice(coords):
    """Points of a regular lattice, x varying slowest."""
    X, Y, Z = np.meshgrid(coords, coords, coords, indexing='ij')
    return np.stack([X.ravel(), Y.ravel(), Z.ravel()], axis=-1)


@pytest.fixture
def make_lattice():
    return _lattice


@pytest.fixture
def lattice_points():
    """27 points on the {0, 1.5, 3}^3 lattice."""
    return _lattice([0.0, 1.5, 3.0])
