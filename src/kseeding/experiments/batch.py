"""
Batches of independent clustering trials.

Each trial gets its own torch generator, seeded from a child of a NumPy
``SeedSequence``. Trial i therefore sees the same random stream whether the
batch runs sequentially or on a thread pool, and no two trials share a stream.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Union, Dict, Any, Sequence, List
import os
import time
import numpy as np
import torch
from torch import Tensor

from ..base.data_structures import TrialBatch, TrialRecord, STRATEGIES
from ..exceptions import InvalidInputError, RefinementError
from ..utils.validation import (
    validate_data, float_dtype, check_n_clusters, check_strategy, spawn_seeds, make_generator
)
from .runner import ClusteringRunner


class BatchExperimentRunner:
    """Repeats independent clustering trials and collects them into a TrialBatch.

    Parameters
    ----------
    runner : ClusteringRunner, optional
        Runs each trial; defaults to ``ClusteringRunner()``
    n_jobs : int, default=1
        Number of worker threads. -1 uses all CPUs.
    random_state : int or torch.Generator, optional
        Root of the per-trial seeds. None draws fresh entropy for every batch.
    verbose : int, default=0
        Verbosity level (0=silent, 1=per batch, 2=per trial)
    """

    def __init__(self,
                 runner: Optional[ClusteringRunner] = None,
                 n_jobs: int = 1,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 verbose: int = 0):
        if n_jobs == 0 or n_jobs < -1:
            raise ValueError(f"n_jobs must be positive or -1, got {n_jobs}")
        self.runner = runner if runner is not None else ClusteringRunner(verbose=max(0, verbose - 2))
        self.n_jobs = n_jobs
        self.random_state = random_state
        self.verbose = verbose

    def _n_workers(self) -> int:
        if self.n_jobs == -1:
            return os.cpu_count() or 1
        return self.n_jobs

    def _run_trial(self, X: Tensor, n_clusters: int, strategy: str,
                   trial_index: int, seed: int) -> TrialRecord:
        generator = make_generator(seed)
        start_time = time.perf_counter()
        try:
            result = self.runner.run(X, n_clusters, strategy, generator=generator)
        except RefinementError as exc:
            elapsed = time.perf_counter() - start_time
            if self.verbose >= 2:
                print(f"Trial {trial_index:4d} [{strategy}]: failed ({type(exc).__name__}: {exc})")
            return TrialRecord(trial_index=trial_index, strategy=strategy,
                               error=f"{type(exc).__name__}: {exc}",
                               seed=seed, elapsed=elapsed)

        elapsed = time.perf_counter() - start_time
        if self.verbose >= 2:
            print(f"Trial {trial_index:4d} [{strategy}]: within SS = "
                  f"{result.total_within_ss:.4f} in {result.n_iter} iterations ({elapsed:.3f}s)")
        return TrialRecord(trial_index=trial_index, strategy=strategy, result=result,
                           seed=seed, elapsed=elapsed)

    def run_batch(self, points: Union[Tensor, np.ndarray], n_clusters: int,
                  n_iter: int, strategy: str) -> TrialBatch:
        """Run ``n_iter`` independent trials with one initialization strategy.

        Args:
            points: (n, d) data points, shared read-only by all trials
            n_clusters: Number of clusters k
            n_iter: Number of trials
            strategy: 'standard' or 'seeded'; seeded trials draw fresh
                K-means++ centers every time

        Returns:
            TrialBatch ordered by trial index. Trials whose refinement failed
            are kept as failed records.

        Raises:
            InvalidInputError: Bad data, k, n_iter or strategy
        """
        check_strategy(strategy)
        if isinstance(n_iter, bool) or not isinstance(n_iter, (int, np.integer)) or n_iter < 1:
            raise InvalidInputError(f"n_iter must be a positive integer, got {n_iter}")

        X = validate_data(points, dtype=float_dtype(points), device=self.runner.device)
        check_n_clusters(n_clusters, X.shape[0])

        seeds = spawn_seeds(self.random_state, int(n_iter))
        start_time = time.perf_counter()

        n_workers = self._n_workers()
        if n_workers == 1:
            records: List[TrialRecord] = [
                self._run_trial(X, n_clusters, strategy, i, seed)
                for i, seed in enumerate(seeds)
            ]
        else:
            with ThreadPoolExecutor(max_workers=n_workers) as executor:
                futures = [
                    executor.submit(self._run_trial, X, n_clusters, strategy, i, seed)
                    for i, seed in enumerate(seeds)
                ]
                records = [future.result() for future in futures]

        batch = TrialBatch(strategy=strategy, n_clusters=n_clusters)
        for record in sorted(records, key=lambda r: r.trial_index):
            batch.append(record)

        if self.verbose >= 1:
            print(f"Batch [{strategy}]: {len(batch)} trials, {batch.n_failed} failed "
                  f"({time.perf_counter() - start_time:.3f}s)")

        return batch

    def run_comparison(self, points: Union[Tensor, np.ndarray], n_clusters: int,
                       n_iter: int,
                       strategies: Sequence[str] = STRATEGIES) -> Dict[str, TrialBatch]:
        """Run one batch per strategy on the same data."""
        return {
            strategy: self.run_batch(points, n_clusters, n_iter, strategy)
            for strategy in strategies
        }

    def get_params(self) -> Dict[str, Any]:
        return {
            'runner': self.runner,
            'n_jobs': self.n_jobs,
            'random_state': self.random_state,
            'verbose': self.verbose
        }
