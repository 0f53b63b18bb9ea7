"""
K-means++ initialization strategy.

Selects initial cluster centers using the K-means++ algorithm, which chooses
centers that are far apart to improve convergence speed and quality.
"""

from typing import List, Optional, Tuple, Dict, Any, Union
import warnings
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..distances.euclidean import DistanceTracker
from ..exceptions import DegenerateSamplingWarning, InvalidInputError
from ..utils.validation import validate_data, float_dtype, check_n_clusters


def _draw_candidates(weights: Tensor, n_candidates: int,
                     generator: Optional[torch.Generator] = None) -> Tuple[List[int], bool]:
    """Sample point indices with probability proportional to ``weights``.

    Returns the sampled indices and whether the draw was degenerate. When every
    weight is zero the draw is uniform over all points (every point then has
    zero weight). Infinite weights, from float overflow on extreme data, are
    sampled uniformly among themselves.
    """
    w = weights.detach().to(device='cpu', dtype=torch.float64)

    if torch.isinf(w).any():
        pool = torch.nonzero(torch.isinf(w)).squeeze(1)
        picks = torch.randint(len(pool), (n_candidates,), generator=generator)
        return pool[picks].tolist(), False

    total = w.sum().item()
    if not total > 0.0:
        picks = torch.randint(len(w), (n_candidates,), generator=generator)
        return picks.tolist(), True

    picks = torch.multinomial(w / total, n_candidates, replacement=True, generator=generator)
    return picks.tolist(), False


def select_seeds(points: Tensor, n_clusters: int,
                 generator: Optional[torch.Generator] = None,
                 n_local_trials: int = 1,
                 return_info: bool = False) -> Union[Tensor, Tuple[Tensor, Dict[str, Any]]]:
    """Choose ``n_clusters`` rows of ``points`` as starting centers by K-means++.

    Algorithm:
    1. Choose first center uniformly at random
    2. For each remaining center:
       - Sample a point with probability proportional to its squared distance
         to the nearest center chosen so far
       - Fold that point into the nearest-center distances

    Args:
        points: (n, d) data points
        n_clusters: Number of centers k, 1 <= k <= n
        generator: Random source for this call; None uses torch's global RNG
        n_local_trials: Candidates drawn per step. With more than one, the
            candidate giving the lowest potential is kept (greedy K-means++).
        return_info: Also return a dict with the chosen row ``indices``,
            ``n_degenerate_draws`` and the ``potentials`` after each step

    Returns:
        (k, d) tensor of centers, or ``(centers, info)`` when ``return_info``

    Raises:
        InvalidInputError: Empty or non-finite data, k outside [1, n], or
            n_local_trials below 1
    """
    points = validate_data(points, dtype=float_dtype(points))
    n_points = points.shape[0]
    check_n_clusters(n_clusters, n_points)
    if n_local_trials < 1:
        raise InvalidInputError(f"n_local_trials must be at least 1, got {n_local_trials}")

    tracker = DistanceTracker(points)

    first_idx = torch.randint(n_points, (1,), generator=generator).item()
    center_indices = [first_idx]
    potentials = []
    n_degenerate = 0

    if n_clusters > 1:
        tracker.reset(points[first_idx])
        potentials.append(tracker.potential)

    for c in range(1, n_clusters):
        candidates, degenerate = _draw_candidates(tracker.distances, n_local_trials, generator)
        if degenerate:
            n_degenerate += 1

        if len(candidates) == 1:
            best_candidate = candidates[0]
        else:
            best_potential = float('inf')
            best_candidate = candidates[0]
            for idx in candidates:
                potential = tracker.preview(points[idx])
                if potential < best_potential:
                    best_potential = potential
                    best_candidate = idx

        center_indices.append(best_candidate)
        tracker.update(points[best_candidate])
        potentials.append(tracker.potential)

    if n_degenerate:
        warnings.warn(
            f"K-means++ found all sampling weights zero in {n_degenerate} of "
            f"{n_clusters - 1} draws; fewer than {n_clusters} distinct points? "
            f"Fell back to uniform sampling.",
            DegenerateSamplingWarning,
            stacklevel=2
        )

    centers = points[torch.tensor(center_indices, device=points.device)].clone()

    if return_info:
        info = {
            'indices': center_indices,
            'n_degenerate_draws': n_degenerate,
            'potentials': potentials,
        }
        return centers, info
    return centers


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ initialization for better starting positions.

    Thin strategy wrapper around :func:`select_seeds` that remembers the
    indices of its last draw and counts degenerate draws across calls.
    """

    def __init__(self, n_local_trials: int = 1):
        """
        Args:
            n_local_trials: Number of candidates to try for each center.
                           1 gives plain K-means++; sklearn uses 2 + log(k).
        """
        self.n_local_trials = n_local_trials
        self.last_indices_: Optional[List[int]] = None
        self.n_degenerate_draws_ = 0

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Initialize cluster centers using K-means++.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Random source for this call

        Returns:
            (n_clusters, d) tensor of centers, each a row of ``points``
        """
        centers, info = select_seeds(points, n_clusters, generator=generator,
                                     n_local_trials=self.n_local_trials,
                                     return_info=True)
        self.last_indices_ = info['indices']
        self.n_degenerate_draws_ += info['n_degenerate_draws']
        return centers

    def __repr__(self) -> str:
        return f"KMeansPlusPlusInit(n_local_trials={self.n_local_trials})"
