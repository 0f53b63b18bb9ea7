"""
Random initialization strategy.

Selects random points from the dataset as initial cluster centers. This is the
"standard" start the seeded strategy is compared against.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..utils.validation import check_n_clusters


class RandomInit(InitializationStrategy):
    """Random initialization by selecting points from the dataset.

    Selects n_clusters random points (without replacement) as initial centers.
    """

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Initialize clusters with random points.

        Args:
            points: (n, d) data points
            n_clusters: Number of clusters
            generator: Random source for this call

        Returns:
            (n_clusters, d) tensor of distinct rows of ``points``
        """
        n_points = points.shape[0]
        check_n_clusters(n_clusters, n_points)

        indices = torch.randperm(n_points, generator=generator)[:n_clusters]

        return points[indices.to(points.device)].clone()
