"""Refinement algorithms."""

from .lloyd import LloydKMeans, KMeansObjective

__all__ = [
    'LloydKMeans',
    'KMeansObjective'
]
