"""Base classes, interfaces and records for seeding experiments."""

from .interfaces import (
    InitializationStrategy,
    RefinementPrimitive,
    ConvergenceCriterion,
    ClusteringObjective
)

from .data_structures import (
    ClusterResult,
    TrialRecord,
    TrialBatch,
    SummaryStatistics,
    STRATEGIES,
    GROUND_TRUTH
)

__all__ = [
    # Interfaces
    'InitializationStrategy',
    'RefinementPrimitive',
    'ConvergenceCriterion',
    'ClusteringObjective',

    # Data structures
    'ClusterResult',
    'TrialRecord',
    'TrialBatch',
    'SummaryStatistics',
    'STRATEGIES',
    'GROUND_TRUTH'
]
