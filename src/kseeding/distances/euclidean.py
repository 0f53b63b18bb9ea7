"""
Squared Euclidean distances for seeding and refinement.

Every distance here is computed in a single vectorized pass over the data
matrix: broadcast-subtract, square, sum over the feature axis.
"""

from typing import Optional
import torch
from torch import Tensor


def squared_distances_to_point(points: Tensor, reference: Tensor) -> Tensor:
    """Squared distance from every point to one reference point.

    Args:
        points: (n, d) data points
        reference: (d,) point, typically a chosen center

    Returns:
        (n,) tensor of squared Euclidean distances
    """
    if reference.dim() != 1 or reference.shape[0] != points.shape[1]:
        raise ValueError(f"Reference of shape {tuple(reference.shape)} does not match "
                         f"points of dimension {points.shape[1]}")
    diff = points - reference.unsqueeze(0)
    return torch.sum(diff * diff, dim=1)


def nearest_so_far(previous: Tensor, new: Tensor) -> Tensor:
    """Merge distances to a new center into the running nearest-center distances.

    Args:
        previous: (n,) squared distances to the nearest center chosen so far
        new: (n,) squared distances to the newly chosen center

    Returns:
        (n,) element-wise minimum
    """
    if previous.shape != new.shape:
        raise ValueError(f"Shape mismatch: {tuple(previous.shape)} vs {tuple(new.shape)}")
    return torch.minimum(previous, new)


def pairwise_squared_distances(points: Tensor, centers: Tensor) -> Tensor:
    """Squared distances between every point and every center.

    Args:
        points: (n, d) data points
        centers: (k, d) centers

    Returns:
        (n, k) tensor of squared distances
    """
    if points.shape[1] != centers.shape[1]:
        raise ValueError(f"Points have dimension {points.shape[1]} but centers "
                         f"have dimension {centers.shape[1]}")
    diff = points.unsqueeze(1) - centers.unsqueeze(0)  # (n, k, d)
    return torch.sum(diff * diff, dim=2)


class DistanceTracker:
    """Squared distance from each point to its nearest chosen center.

    Scratch state for one seeding call. The vector is initialized from the
    first center and afterwards only ever merged with ``nearest_so_far``, so
    no entry can grow as centers are added.
    """

    def __init__(self, points: Tensor):
        self.points = points
        self._distances: Optional[Tensor] = None
        self.n_centers = 0

    def reset(self, center: Tensor) -> Tensor:
        """Start over from a first center; returns the new distances."""
        self._distances = squared_distances_to_point(self.points, center)
        self.n_centers = 1
        return self._distances

    def update(self, center: Tensor) -> Tensor:
        """Fold a newly chosen center into the distances; returns the new distances."""
        if self._distances is None:
            raise RuntimeError("DistanceTracker.update called before reset")
        new_distances = squared_distances_to_point(self.points, center)
        self._distances = nearest_so_far(self._distances, new_distances)
        self.n_centers += 1
        return self._distances

    def preview(self, candidate: Tensor) -> float:
        """Potential the tracker would have if ``candidate`` were added."""
        if self._distances is None:
            raise RuntimeError("DistanceTracker.preview called before reset")
        candidate_distances = squared_distances_to_point(self.points, candidate)
        return nearest_so_far(self._distances, candidate_distances).sum().item()

    @property
    def distances(self) -> Tensor:
        if self._distances is None:
            raise RuntimeError("DistanceTracker has no centers yet")
        return self._distances.clone()

    @property
    def potential(self) -> float:
        """Sum of squared distances to the nearest chosen centers."""
        if self._distances is None:
            raise RuntimeError("DistanceTracker has no centers yet")
        return self._distances.sum().item()

    def __repr__(self) -> str:
        return f"DistanceTracker(n_points={self.points.shape[0]}, n_centers={self.n_centers})"
