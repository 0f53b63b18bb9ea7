"""
Initialization from fixed, caller-supplied centers.

Used to start refinement from the known generating centers of a synthetic
dataset (the ground-truth run), or for warm starts.
"""

from typing import Optional, Union
import numpy as np
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy
from ..utils.validation import validate_centers


class FromCentersInit(InitializationStrategy):
    """Initialize from a given (n_clusters, dimension) matrix of centers."""

    def __init__(self, centers: Union[Tensor, np.ndarray]):
        """
        Args:
            centers: Starting centers; validated against the data at initialize time
        """
        self.centers = centers

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Return the stored centers after checking them against the data.

        Args:
            points: (n, d) data points (used for validation)
            n_clusters: Expected number of clusters
            generator: Ignored

        Returns:
            (n_clusters, d) tensor of centers on the data's device
        """
        centers = validate_centers(self.centers, n_features=points.shape[1],
                                   n_clusters=n_clusters, device=points.device,
                                   dtype=points.dtype)
        return centers.clone()
