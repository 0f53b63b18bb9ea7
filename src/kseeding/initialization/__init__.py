"""Initialization strategies for choosing starting centers."""

from .random import RandomInit
from .kmeans_plusplus import KMeansPlusPlusInit, select_seeds
from .from_centers import FromCentersInit

__all__ = [
    'RandomInit',
    'KMeansPlusPlusInit',
    'FromCentersInit',
    'select_seeds'
]
