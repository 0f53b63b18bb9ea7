"""
Core data structures for seeding experiments.

Result records produced by a single clustering run, the per-trial wrapper
that also captures failures, the accumulating batch of trials and the summary
statistics computed over a batch.
"""

from typing import Optional, List, Dict, Any, Iterator
import torch
from torch import Tensor
from dataclasses import dataclass, field

# Initialization strategies understood by the trial harness
STRATEGIES = ('standard', 'seeded')

# Extra label used for batches built from known generating centers
GROUND_TRUTH = 'ground_truth'


@dataclass(frozen=True)
class ClusterResult:
    """Outcome of one refinement run.

    Produced once by the refinement primitive and never modified afterwards.
    """

    centers: Tensor          # (K, d) final centers
    labels: Tensor           # (n,) cluster index per point in [0, K)
    total_within_ss: float   # sum of squared distances to assigned centers
    n_iter: int
    converged: bool = True

    # Per-cluster breakdown
    within_ss: Optional[Tensor] = None      # (K,)
    cluster_sizes: Optional[Tensor] = None  # (K,)

    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        assert self.centers.dim() == 2
        assert self.labels.dim() == 1
        assert self.total_within_ss >= 0.0

        # Tensors and metadata are copied on creation
        for name in ('centers', 'labels', 'within_ss', 'cluster_sizes'):
            value = getattr(self, name)
            if isinstance(value, Tensor):
                object.__setattr__(self, name, value.clone())
        object.__setattr__(self, 'metadata', dict(self.metadata))

    @property
    def n_clusters(self) -> int:
        return self.centers.shape[0]

    @property
    def n_points(self) -> int:
        return self.labels.shape[0]

    def to(self, device: torch.device) -> 'ClusterResult':
        """Copy of this result with all tensors on ``device``."""
        def move_if_tensor(x):
            return x.to(device) if isinstance(x, Tensor) else x

        return ClusterResult(
            centers=move_if_tensor(self.centers),
            labels=move_if_tensor(self.labels),
            total_within_ss=self.total_within_ss,
            n_iter=self.n_iter,
            converged=self.converged,
            within_ss=move_if_tensor(self.within_ss),
            cluster_sizes=move_if_tensor(self.cluster_sizes),
            metadata=self.metadata.copy()
        )


@dataclass(frozen=True)
class TrialRecord:
    """One trial of a batch: either a result or the error that ended it."""

    trial_index: int
    strategy: str
    result: Optional[ClusterResult] = None
    error: Optional[str] = None
    seed: Optional[int] = None
    elapsed: float = 0.0

    @property
    def failed(self) -> bool:
        return self.result is None

    @property
    def score(self) -> float:
        if self.result is None:
            raise ValueError(f"Trial {self.trial_index} failed: {self.error}")
        return self.result.total_within_ss


@dataclass
class TrialBatch:
    """Ordered collection of trials run with a single initialization strategy.

    Built incrementally by the batch runner and treated as read-only once the
    batch is complete.
    """

    strategy: str
    n_clusters: int
    records: List[TrialRecord] = field(default_factory=list)

    def append(self, record: TrialRecord) -> None:
        if record.strategy != self.strategy:
            raise ValueError(f"Record strategy '{record.strategy}' does not match "
                             f"batch strategy '{self.strategy}'")
        self.records.append(record)

    def successful(self) -> List[TrialRecord]:
        """Records whose refinement finished."""
        return [r for r in self.records if not r.failed]

    def failures(self) -> List[TrialRecord]:
        """Records whose refinement raised."""
        return [r for r in self.records if r.failed]

    @property
    def n_failed(self) -> int:
        return len(self.failures())

    def scores(self) -> Tensor:
        """(m,) float64 tensor of total within-SS over successful trials."""
        return torch.tensor([r.score for r in self.successful()], dtype=torch.float64)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[TrialRecord]:
        return iter(self.records)


@dataclass(frozen=True)
class SummaryStatistics:
    """Five-number summary of the total within-SS over a batch."""

    strategy: str
    n_trials: int
    n_failed: int
    min: float
    p25: float
    median: float
    p75: float
    max: float
    mean: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            'strategy': self.strategy,
            'n_trials': self.n_trials,
            'n_failed': self.n_failed,
            'min': self.min,
            'p25': self.p25,
            'median': self.median,
            'p75': self.p75,
            'max': self.max,
            'mean': self.mean,
        }
