"""Euclidean distance primitives."""

from .euclidean import (
    squared_distances_to_point,
    nearest_so_far,
    pairwise_squared_distances,
    DistanceTracker
)

__all__ = [
    'squared_distances_to_point',
    'nearest_so_far',
    'pairwise_squared_distances',
    'DistanceTracker'
]
