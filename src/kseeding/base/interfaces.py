"""
Core interfaces for seeding and refinement.

This module defines the abstract base classes shared by the initializers, the
refinement primitive and the convergence checks, so that any of them can be
swapped out without touching the trial harness.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, Union
import torch
from torch import Tensor


class InitializationStrategy(ABC):
    """Abstract base class for choosing starting centers."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None,
                   **kwargs) -> Tensor:
        """Choose initial cluster centers.

        Args:
            points: (n, d) tensor of data points
            n_clusters: Number of centers to produce
            generator: Random source for this call; None uses torch's global RNG
            **kwargs: Strategy-specific parameters

        Returns:
            (n_clusters, d) tensor of centers
        """
        pass


class RefinementPrimitive(ABC):
    """Abstract base class for an iterative refinement routine (Lloyd's algorithm).

    Takes data plus either explicit starting centers or a cluster count (in
    which case the primitive picks its own random start) and runs to
    convergence, returning a ``ClusterResult``.
    """

    @abstractmethod
    def refine(self, points: Tensor, initial: Union[int, Tensor],
               generator: Optional[torch.Generator] = None) -> 'ClusterResult':
        """Run refinement to convergence.

        Args:
            points: (n, d) tensor of data points
            initial: (k, d) starting centers, or int k for a random start
            generator: Random source used only when ``initial`` is an int

        Returns:
            ClusterResult with final centers, labels and score

        Raises:
            RefinementError: If refinement cannot finish
        """
        pass

    def __call__(self, points: Tensor, initial: Union[int, Tensor],
                 generator: Optional[torch.Generator] = None) -> 'ClusterResult':
        return self.refine(points, initial, generator=generator)


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class ClusteringObjective(ABC):
    """Abstract base class for clustering objective functions."""

    @abstractmethod
    def compute(self, points: Tensor, centers: Tensor,
                assignments: Tensor) -> Tensor:
        """Compute objective function value.

        Args:
            points: (n, d) tensor of data points
            centers: (k, d) tensor of cluster centers
            assignments: (n,) hard cluster assignments

        Returns:
            Scalar objective value
        """
        pass

    @property
    @abstractmethod
    def minimize(self) -> bool:
        """Whether to minimize (True) or maximize (False) this objective."""
        pass
