"""Trial harness: single runs, batches, and their analysis."""

from .runner import ClusteringRunner
from .batch import BatchExperimentRunner
from .analysis import (
    ComparisonAnalyzer,
    GroundTruthComparison,
    summarize,
    compare_to_ground_truth
)

__all__ = [
    'ClusteringRunner',
    'BatchExperimentRunner',
    'ComparisonAnalyzer',
    'GroundTruthComparison',
    'summarize',
    'compare_to_ground_truth'
]
