"""
Single clustering run: pick starting centers, refine, return the result.
"""

from dataclasses import replace
from typing import Optional, Union, Dict, Any
import numpy as np
import torch
from torch import Tensor

from ..algorithms.lloyd import LloydKMeans
from ..base.interfaces import RefinementPrimitive
from ..base.data_structures import ClusterResult, GROUND_TRUTH
from ..exceptions import InvalidInputError
from ..initialization.kmeans_plusplus import select_seeds
from ..utils.device import parse_device
from ..utils.validation import validate_data, float_dtype, check_strategy


class ClusteringRunner:
    """Runs one refinement from either a cluster count or explicit centers.

    Parameters
    ----------
    refine : RefinementPrimitive or callable, optional
        ``refine(points, initial, generator=...) -> ClusterResult``.
        Defaults to ``LloydKMeans(max_iter, tol)``.
    max_iter : int, default=100
        Iteration cap for the default primitive
    tol : float, default=0.0
        Objective tolerance for the default primitive
    n_local_trials : int, default=1
        Candidates per K-means++ step for the seeded strategy
    device : str or torch.device, optional
        Device the data is moved to before seeding
    verbose : int, default=0
        Verbosity level

    Failures of the primitive propagate unchanged; nothing is retried.
    """

    def __init__(self,
                 refine: Optional[RefinementPrimitive] = None,
                 max_iter: int = 100,
                 tol: float = 0.0,
                 n_local_trials: int = 1,
                 device: Optional[Union[str, torch.device]] = None,
                 verbose: int = 0):
        self.device = parse_device(device)
        self.max_iter = max_iter
        self.tol = tol
        self.n_local_trials = n_local_trials
        self.verbose = verbose
        if refine is None:
            refine = LloydKMeans(max_iter=max_iter, tol=tol, verbose=max(0, verbose - 1),
                                 device=self.device)
        self.refine = refine

    def run(self, points: Tensor, initial_centers_or_k: Union[int, Tensor, np.ndarray],
            strategy: str = 'seeded',
            generator: Optional[torch.Generator] = None) -> ClusterResult:
        """Run one clustering trial.

        Args:
            points: (n, d) data points
            initial_centers_or_k: Cluster count k, or a (k, d) matrix of
                starting centers used as given
            strategy: 'standard' (random start inside the primitive) or
                'seeded' (K-means++ start); only consulted when a count is given
            generator: Random source for seeding and the random start

        Returns:
            ClusterResult; ``metadata['strategy']`` records how it was started

        Raises:
            InvalidInputError: Bad data, k, centers or strategy
            RefinementError: The primitive failed
        """
        X = validate_data(points, dtype=float_dtype(points), device=self.device)
        seeding_info: Dict[str, Any] = {}

        if isinstance(initial_centers_or_k, (int, np.integer)) and not isinstance(initial_centers_or_k, bool):
            check_strategy(strategy)
            if strategy == 'seeded':
                initial, seeding_info = select_seeds(
                    X, int(initial_centers_or_k), generator=generator,
                    n_local_trials=self.n_local_trials, return_info=True
                )
            else:
                initial = int(initial_centers_or_k)
        elif isinstance(initial_centers_or_k, (Tensor, np.ndarray, list)):
            initial = initial_centers_or_k
        else:
            raise InvalidInputError(
                f"Expected a cluster count or a centers matrix, got {type(initial_centers_or_k)}"
            )

        result = self.refine(X, initial, generator=generator)

        metadata = dict(result.metadata, strategy=strategy)
        if seeding_info:
            metadata['seed_indices'] = seeding_info['indices']
            metadata['n_degenerate_draws'] = seeding_info['n_degenerate_draws']
        return replace(result, metadata=metadata)

    def ground_truth(self, points: Tensor,
                     true_centers: Union[Tensor, np.ndarray]) -> ClusterResult:
        """Refine from the known generating centers.

        The result is the best-case benchmark trials are compared against.
        """
        return self.run(points, true_centers, strategy=GROUND_TRUTH)

    def get_params(self) -> Dict[str, Any]:
        return {
            'refine': self.refine,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'n_local_trials': self.n_local_trials,
            'device': self.device,
            'verbose': self.verbose
        }
