"""
Aggregation of trial batches.

Summaries use only the total within-cluster sum of squares and the strategy
tag, so they do not depend on trial order. Nothing here modifies a batch.
"""

from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Iterable, Union
import torch
from torch import Tensor

from ..base.data_structures import TrialBatch, ClusterResult, SummaryStatistics, GROUND_TRUTH
from ..exceptions import EmptyBatchError
from ..utils.metrics import adjusted_rand_score

_QUANTILES = (0.0, 0.25, 0.5, 0.75, 1.0)


def _successful_or_raise(batch: TrialBatch):
    if len(batch) == 0:
        raise EmptyBatchError(f"Batch '{batch.strategy}' has no trials")
    successful = batch.successful()
    if not successful:
        raise EmptyBatchError(f"All {len(batch)} trials in batch '{batch.strategy}' failed")
    return successful


def summarize(batch: TrialBatch) -> SummaryStatistics:
    """Five-number summary (plus mean) of the total within-SS of a batch.

    Quantiles use linear interpolation. Failed trials are excluded from the
    statistics and reported in ``n_failed``.

    Raises:
        EmptyBatchError: The batch has no trials, or none that succeeded
    """
    _successful_or_raise(batch)
    scores = batch.scores()
    q = torch.quantile(scores, torch.tensor(_QUANTILES, dtype=scores.dtype))

    return SummaryStatistics(
        strategy=batch.strategy,
        n_trials=len(batch),
        n_failed=batch.n_failed,
        min=q[0].item(),
        p25=q[1].item(),
        median=q[2].item(),
        p75=q[3].item(),
        max=q[4].item(),
        mean=scores.mean().item()
    )


@dataclass(frozen=True)
class GroundTruthComparison:
    """Per-trial comparison of a batch against the ground-truth run."""

    strategy: str
    ground_truth_score: float
    trial_indices: List[int]
    scores: Tensor       # (m,) float64
    differences: Tensor  # score - ground truth
    ratios: Tensor       # score / ground truth
    agreement: Tensor    # adjusted Rand index against ground-truth labels

    @property
    def n_trials(self) -> int:
        return len(self.trial_indices)

    def fraction_within(self, rel_tol: float) -> float:
        """Fraction of trials whose score is within ``rel_tol`` of the ground truth."""
        return (torch.abs(self.ratios - 1.0) <= rel_tol).double().mean().item()

    def fraction_worse_than(self, margin: float) -> float:
        """Fraction of trials scoring more than ``(1 + margin)`` times the ground truth."""
        return (self.ratios > 1.0 + margin).double().mean().item()


def compare_to_ground_truth(batch: TrialBatch, ground_truth: ClusterResult) -> GroundTruthComparison:
    """Compare every successful trial of ``batch`` with ``ground_truth``.

    A ratio is ``inf`` when the ground-truth score is 0 and the trial's is not,
    and 1.0 when both are 0.

    Raises:
        EmptyBatchError: The batch has no successful trials
    """
    successful = _successful_or_raise(batch)
    gt_score = float(ground_truth.total_within_ss)

    scores = torch.tensor([r.score for r in successful], dtype=torch.float64)
    differences = scores - gt_score
    if gt_score > 0.0:
        ratios = scores / gt_score
    else:
        ratios = torch.where(scores > 0.0,
                             torch.full_like(scores, float('inf')),
                             torch.ones_like(scores))

    agreement = torch.tensor(
        [adjusted_rand_score(ground_truth.labels, r.result.labels) for r in successful],
        dtype=torch.float64
    )

    return GroundTruthComparison(
        strategy=batch.strategy,
        ground_truth_score=gt_score,
        trial_indices=[r.trial_index for r in successful],
        scores=scores,
        differences=differences,
        ratios=ratios,
        agreement=agreement
    )


class ComparisonAnalyzer:
    """Summaries and ground-truth comparisons for a set of batches.

    Parameters
    ----------
    rel_tol : float, default=0.01
        Relative distance to the ground-truth score that counts as a match
    margin : float, default=0.5
        Relative excess over the ground-truth score that counts as a bad run
    """

    def __init__(self, rel_tol: float = 0.01, margin: float = 0.5):
        self.rel_tol = rel_tol
        self.margin = margin

    def summarize(self, batch: TrialBatch) -> SummaryStatistics:
        return summarize(batch)

    def compare_to_ground_truth(self, batch: TrialBatch,
                                ground_truth: ClusterResult) -> GroundTruthComparison:
        return compare_to_ground_truth(batch, ground_truth)

    def summary_table(self, batches: Union[Dict[str, TrialBatch], Iterable[TrialBatch]],
                      ground_truth: Optional[ClusterResult] = None) -> List[SummaryStatistics]:
        """One SummaryStatistics row per batch, plus a ground-truth row if given."""
        if isinstance(batches, dict):
            batches = batches.values()
        rows = [summarize(batch) for batch in batches]
        if ground_truth is not None:
            score = float(ground_truth.total_within_ss)
            rows.append(SummaryStatistics(strategy=GROUND_TRUTH, n_trials=1, n_failed=0,
                                          min=score, p25=score, median=score, p75=score,
                                          max=score, mean=score))
        return rows

    def report(self, batches: Union[Dict[str, TrialBatch], Iterable[TrialBatch]],
               ground_truth: ClusterResult) -> Dict[str, Dict[str, Any]]:
        """Per-strategy rates of matching and badly missing the ground truth."""
        if isinstance(batches, dict):
            batches = batches.values()
        report = {}
        for batch in batches:
            comparison = compare_to_ground_truth(batch, ground_truth)
            report[batch.strategy] = {
                'n_trials': len(batch),
                'n_failed': batch.n_failed,
                'fraction_within_tol': comparison.fraction_within(self.rel_tol),
                'fraction_worse_than_margin': comparison.fraction_worse_than(self.margin),
                'median_ratio': torch.quantile(comparison.ratios, 0.5).item(),
                'mean_agreement': comparison.agreement.mean().item(),
            }
        return report

    @staticmethod
    def format_table(rows: List[SummaryStatistics]) -> str:
        """Fixed-width text table of summary rows."""
        header = (f"{'strategy':<14}{'trials':>8}{'failed':>8}{'min':>12}{'25%':>12}"
                  f"{'median':>12}{'75%':>12}{'max':>12}")
        lines = [header, '-' * len(header)]
        for row in rows:
            lines.append(
                f"{row.strategy:<14}{row.n_trials:>8d}{row.n_failed:>8d}{row.min:>12.3f}"
                f"{row.p25:>12.3f}{row.median:>12.3f}{row.p75:>12.3f}{row.max:>12.3f}"
            )
        return '\n'.join(lines)
