"""
Exceptions and warnings raised by the seeding and trial machinery.

Input problems fail fast with ``InvalidInputError``. Failures of the
refinement primitive derive from ``RefinementError`` so that the batch runner
can record them per trial instead of aborting the batch.
"""


class InvalidInputError(ValueError):
    """Bad cluster count, empty or non-finite data, or malformed centers."""


class RefinementError(RuntimeError):
    """Base class for failures reported by a refinement primitive."""


class ConvergenceFailure(RefinementError):
    """Refinement hit its iteration cap before the assignments settled."""

    def __init__(self, message: str, n_iter: int = 0, objective: float = float('nan')):
        super().__init__(message)
        self.n_iter = n_iter
        self.objective = objective


class EmptyClusterError(RefinementError):
    """A cluster lost all of its points during refinement."""

    def __init__(self, message: str, cluster_index: int = -1, n_iter: int = 0):
        super().__init__(message)
        self.cluster_index = cluster_index
        self.n_iter = n_iter


class EmptyBatchError(ValueError):
    """Summary statistics were requested for a batch with no usable trials."""


class DegenerateSamplingWarning(UserWarning):
    """All sampling weights were zero; a uniform draw was used instead."""
