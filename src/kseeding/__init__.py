"""
kseeding: K-means++ seeding and repeated-trial clustering experiments.

This package implements:
- K-means++ seeding by distance-weighted sampling
- A Lloyd's algorithm refinement primitive
- A batch harness running many independent trials per initialization strategy
- Summaries of trial outcomes and comparison against a ground-truth run

Example usage:
    >>> from kseeding import BatchExperimentRunner, ClusteringRunner, ComparisonAnalyzer
    >>> from kseeding.datasets import make_gaussian_clusters
    >>>
    >>> X, y, true_centers = make_gaussian_clusters(n_per=100, seed=0)
    >>> batches = BatchExperimentRunner(random_state=0).run_comparison(X, 3, n_iter=200)
    >>> ground_truth = ClusteringRunner().ground_truth(X, true_centers)
    >>>
    >>> analyzer = ComparisonAnalyzer()
    >>> print(analyzer.format_table(analyzer.summary_table(batches, ground_truth)))
"""

__version__ = '0.1.0'

from .algorithms.lloyd import LloydKMeans
from .initialization import select_seeds, KMeansPlusPlusInit, RandomInit, FromCentersInit
from .distances import DistanceTracker
from .experiments import (
    ClusteringRunner,
    BatchExperimentRunner,
    ComparisonAnalyzer,
    GroundTruthComparison,
    summarize,
    compare_to_ground_truth
)
from .config import ExperimentConfig

from .base import (
    ClusterResult,
    TrialRecord,
    TrialBatch,
    SummaryStatistics,
    STRATEGIES
)

from .exceptions import (
    InvalidInputError,
    RefinementError,
    ConvergenceFailure,
    EmptyClusterError,
    EmptyBatchError,
    DegenerateSamplingWarning
)

__all__ = [
    # Seeding
    'select_seeds',
    'KMeansPlusPlusInit',
    'RandomInit',
    'FromCentersInit',
    'DistanceTracker',

    # Refinement
    'LloydKMeans',

    # Trial harness
    'ClusteringRunner',
    'BatchExperimentRunner',
    'ComparisonAnalyzer',
    'GroundTruthComparison',
    'summarize',
    'compare_to_ground_truth',
    'ExperimentConfig',

    # Records
    'ClusterResult',
    'TrialRecord',
    'TrialBatch',
    'SummaryStatistics',
    'STRATEGIES',

    # Errors
    'InvalidInputError',
    'RefinementError',
    'ConvergenceFailure',
    'EmptyClusterError',
    'EmptyBatchError',
    'DegenerateSamplingWarning',

    # Version
    '__version__'
]
