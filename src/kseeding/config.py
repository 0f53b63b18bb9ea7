"""
Experiment configuration.

Collects the knobs of a standard-versus-seeded comparison in one place and
builds the runners from them.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Union, Dict, Any
import torch

from .exceptions import InvalidInputError
from .experiments.analysis import ComparisonAnalyzer
from .experiments.batch import BatchExperimentRunner
from .experiments.runner import ClusteringRunner


@dataclass
class ExperimentConfig:
    """Settings for a batch comparison experiment.

    Attributes:
        n_clusters: Number of clusters k
        n_iter: Trials per strategy
        max_iter: Iteration cap for each refinement
        tol: Relative objective tolerance for refinement (0 = until assignments settle)
        n_local_trials: Candidates per K-means++ step (1 = plain K-means++)
        n_jobs: Worker threads for a batch (-1 = all CPUs)
        random_state: Root seed for per-trial generators
        device: Torch device spec ('cpu', 'cuda', 'auto', ...)
        verbose: 0 silent, 1 per batch, 2 per trial, 3 per iteration
        rel_tol: Relative distance to ground truth that counts as a match
        margin: Relative excess over ground truth that counts as a bad run
    """

    n_clusters: int = 3
    n_iter: int = 1000
    max_iter: int = 100
    tol: float = 0.0
    n_local_trials: int = 1
    n_jobs: int = 1
    random_state: Optional[int] = None
    device: Optional[Union[str, torch.device]] = None
    verbose: int = 0
    rel_tol: float = 0.01
    margin: float = 0.5

    def validate(self) -> 'ExperimentConfig':
        if self.n_clusters < 1:
            raise InvalidInputError(f"n_clusters must be positive, got {self.n_clusters}")
        if self.n_iter < 1:
            raise InvalidInputError(f"n_iter must be positive, got {self.n_iter}")
        if self.max_iter < 1:
            raise InvalidInputError(f"max_iter must be positive, got {self.max_iter}")
        if self.tol < 0:
            raise InvalidInputError(f"tol must be non-negative, got {self.tol}")
        if self.n_local_trials < 1:
            raise InvalidInputError(f"n_local_trials must be positive, got {self.n_local_trials}")
        if self.n_jobs == 0 or self.n_jobs < -1:
            raise InvalidInputError(f"n_jobs must be positive or -1, got {self.n_jobs}")
        if self.rel_tol < 0 or self.margin < 0:
            raise InvalidInputError("rel_tol and margin must be non-negative")
        return self

    def build_runner(self) -> ClusteringRunner:
        return ClusteringRunner(max_iter=self.max_iter, tol=self.tol,
                                n_local_trials=self.n_local_trials,
                                device=self.device, verbose=max(0, self.verbose - 2))

    def build_batch_runner(self) -> BatchExperimentRunner:
        self.validate()
        return BatchExperimentRunner(runner=self.build_runner(), n_jobs=self.n_jobs,
                                     random_state=self.random_state, verbose=self.verbose)

    def build_analyzer(self) -> ComparisonAnalyzer:
        return ComparisonAnalyzer(rel_tol=self.rel_tol, margin=self.margin)

    def to_dict(self) -> Dict[str, Any]:
        params = asdict(self)
        params['device'] = str(self.device) if self.device is not None else None
        return params
