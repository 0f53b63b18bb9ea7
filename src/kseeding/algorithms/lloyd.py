"""
Lloyd's algorithm for K-means refinement.

Alternates a nearest-center assignment step with a mean update step until no
point changes cluster. This is the refinement primitive the trial harness runs
after seeding; any other ``RefinementPrimitive`` can be dropped in instead.
"""

from typing import Optional, Union
import time
import numpy as np
import torch
from torch import Tensor

from ..base.interfaces import RefinementPrimitive, ClusteringObjective, ConvergenceCriterion
from ..base.data_structures import ClusterResult
from ..distances.euclidean import pairwise_squared_distances
from ..exceptions import ConvergenceFailure, EmptyClusterError
from ..initialization.random import RandomInit
from ..utils.convergence import ChangeInAssignments, ChangeInObjective, CombinedCriterion
from ..utils.device import parse_device
from ..utils.metrics import within_cluster_ss
from ..utils.validation import validate_data, validate_centers, float_dtype, check_n_clusters


class KMeansObjective(ClusteringObjective):
    """K-means objective: sum of squared distances to centroids."""

    def compute(self, points: Tensor, centers: Tensor,
                assignments: Tensor) -> Tensor:
        """Compute within-cluster sum of squares."""
        return within_cluster_ss(points, assignments, centers).sum()

    @property
    def minimize(self) -> bool:
        return True


class LloydKMeans(RefinementPrimitive):
    """Lloyd's iterative refinement of K-means centers.

    Parameters
    ----------
    max_iter : int, default=100
        Iteration cap. Reaching it without convergence raises
        ``ConvergenceFailure`` rather than returning a partial result.
    tol : float, default=0.0
        Relative objective change that also counts as converged. With 0.0 the
        loop runs until an assignment step changes nothing.
    verbose : int, default=0
        Verbosity level (0=silent, 1=summary, 2=every iteration)
    device : str or torch.device, optional
        Device for computation; data and centers are moved there

    Notes
    -----
    A cluster left without points raises ``EmptyClusterError``; the caller
    decides what a failed run means.
    """

    def __init__(self,
                 max_iter: int = 100,
                 tol: float = 0.0,
                 verbose: int = 0,
                 device: Optional[Union[str, torch.device]] = None):
        if max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {max_iter}")
        self.max_iter = max_iter
        self.tol = tol
        self.verbose = verbose
        self.device = parse_device(device)
        self.objective = KMeansObjective()

    def _create_convergence_criterion(self) -> ConvergenceCriterion:
        # Built per call so concurrent refinements never share state
        if self.tol > 0:
            return CombinedCriterion(
                [ChangeInAssignments(), ChangeInObjective(rel_tol=self.tol)],
                mode='any'
            )
        return ChangeInAssignments()

    def _initial_centers(self, X: Tensor, initial: Union[int, Tensor, np.ndarray],
                         generator: Optional[torch.Generator]) -> Tensor:
        if isinstance(initial, (int, np.integer)) and not isinstance(initial, bool):
            return RandomInit().initialize(X, int(initial), generator=generator)

        centers = validate_centers(initial, n_features=X.shape[1], device=X.device, dtype=X.dtype)
        check_n_clusters(centers.shape[0], X.shape[0])
        return centers.clone()

    def refine(self, points: Tensor, initial: Union[int, Tensor, np.ndarray],
               generator: Optional[torch.Generator] = None) -> ClusterResult:
        """Run Lloyd's algorithm to convergence.

        Args:
            points: (n, d) data points
            initial: (k, d) starting centers, or int k to start from k
                distinct random rows of ``points``
            generator: Random source for the random start

        Returns:
            ClusterResult of the converged run

        Raises:
            InvalidInputError: Bad data, k or centers
            EmptyClusterError: A cluster lost all its points
            ConvergenceFailure: ``max_iter`` reached without convergence
        """
        X = validate_data(points, dtype=float_dtype(points), device=self.device)
        centers = self._initial_centers(X, initial, generator)
        initial_centers = centers.clone()
        n_clusters = centers.shape[0]

        criterion = self._create_convergence_criterion()
        objective_history = []
        converged = False
        start_time = time.time()

        for iteration in range(self.max_iter):
            # Assignment step
            labels = torch.argmin(pairwise_squared_distances(X, centers), dim=1)
            counts = torch.bincount(labels, minlength=n_clusters)

            empty = torch.nonzero(counts == 0)
            if len(empty) > 0:
                cluster_index = int(empty[0].item())
                raise EmptyClusterError(
                    f"Cluster {cluster_index} is empty at iteration {iteration}; "
                    f"try a better set of initial centers",
                    cluster_index=cluster_index, n_iter=iteration
                )

            # Update step
            sums = torch.zeros_like(centers).index_add_(0, labels, X)
            centers = sums / counts.unsqueeze(1).to(X.dtype)

            objective_value = self.objective.compute(X, centers, labels).item()
            objective_history.append(objective_value)

            if self.verbose >= 2:
                print(f"Iteration {iteration:3d}: objective = {objective_value:.6f}")

            if criterion.check({
                'iteration': iteration,
                'objective': objective_value,
                'assignments': labels
            }):
                converged = True
                break

        n_iter = iteration + 1

        if not converged:
            raise ConvergenceFailure(
                f"Failed to converge after {self.max_iter} iterations "
                f"(objective = {objective_history[-1]:.6f})",
                n_iter=n_iter, objective=objective_history[-1]
            )

        if self.verbose >= 1:
            print(f"Converged at iteration {n_iter} with objective "
                  f"{objective_history[-1]:.6f} ({time.time() - start_time:.3f}s)")

        per_cluster = within_cluster_ss(X, labels, centers)

        return ClusterResult(
            centers=centers,
            labels=labels,
            total_within_ss=float(per_cluster.sum().item()),
            n_iter=n_iter,
            converged=True,
            within_ss=per_cluster,
            cluster_sizes=counts,
            metadata={
                'initial_centers': initial_centers,
                'objective_history': objective_history,
            }
        )

    def get_params(self):
        return {
            'max_iter': self.max_iter,
            'tol': self.tol,
            'verbose': self.verbose,
            'device': self.device
        }

    def __repr__(self) -> str:
        return f"LloydKMeans(max_iter={self.max_iter}, tol={self.tol})"
