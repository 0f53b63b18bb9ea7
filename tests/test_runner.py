# tests/test_runner.py
"""
U6 — ClusteringRunner: one seeding + refinement run

Covers:
- 'seeded' runs K-means++ first and records the seed rows
- 'standard' hands k to the primitive's own random start
- Explicit centers are used as given; ground_truth labels its result
- Primitive failures propagate unchanged
- Bad strategies / inputs raise InvalidInputError
"""

from __future__ import annotations

import numpy as np
import pytest
import torch

from kseeding.experiments import ClusteringRunner
from kseeding.base import ClusterResult, GROUND_TRUTH
from kseeding.exceptions import ConvergenceFailure, InvalidInputError

from data_gen import make_three_blobs


@pytest.fixture(scope="module")
def blobs():
    X, y, C = make_three_blobs(seed=1)
    return torch.as_tensor(X), torch.as_tensor(y), torch.as_tensor(C)


class RecordingPrimitive:
    """Refinement stub that remembers what it was started from."""

    def __init__(self):
        self.calls = []

    def __call__(self, points, initial, generator=None):
        self.calls.append(initial)
        k = initial if isinstance(initial, int) else initial.shape[0]
        centers = points[:k].clone()
        labels = torch.arange(points.shape[0]) % k
        return ClusterResult(centers=centers, labels=labels, total_within_ss=1.0,
                             n_iter=1, metadata={"source": "stub"})


def test_seeded_run_records_seed_rows(blobs, generator):
    X, _, _ = blobs
    stub = RecordingPrimitive()
    result = ClusteringRunner(refine=stub).run(X, 3, "seeded", generator=generator)

    start = stub.calls[0]
    assert isinstance(start, torch.Tensor) and start.shape == (3, 2)
    assert result.metadata["strategy"] == "seeded"
    assert len(result.metadata["seed_indices"]) == 3
    assert torch.equal(start, X[result.metadata["seed_indices"]])
    assert result.metadata["n_degenerate_draws"] == 0
    assert result.metadata["source"] == "stub"


def test_standard_run_passes_count(blobs, generator):
    X, _, _ = blobs
    stub = RecordingPrimitive()
    result = ClusteringRunner(refine=stub).run(X, 3, "standard", generator=generator)

    assert stub.calls == [3]
    assert result.metadata["strategy"] == "standard"
    assert "seed_indices" not in result.metadata


def test_explicit_centers_used_as_given(blobs):
    X, _, C = blobs
    stub = RecordingPrimitive()
    ClusteringRunner(refine=stub).run(X, C)
    assert torch.equal(stub.calls[0], C)


def test_ground_truth_with_default_primitive(blobs):
    X, y, C = blobs
    result = ClusteringRunner().ground_truth(X, C)

    assert result.metadata["strategy"] == GROUND_TRUTH
    assert result.converged
    assert torch.equal(result.metadata["initial_centers"], C)


def test_seeded_default_primitive_end_to_end(blobs, generator):
    X, _, _ = blobs
    result = ClusteringRunner().run(X, 3, "seeded", generator=generator)
    assert result.n_clusters == 3
    assert result.total_within_ss > 0


def test_failures_propagate(blobs):
    X, _, C = blobs
    with pytest.raises(ConvergenceFailure):
        ClusteringRunner(max_iter=1).run(X, C)


@pytest.mark.parametrize("bad", [3.0, "3", None])
def test_bad_initial_type(blobs, bad):
    X, _, _ = blobs
    with pytest.raises(InvalidInputError):
        ClusteringRunner(refine=RecordingPrimitive()).run(X, bad)


def test_bad_strategy(blobs):
    X, _, _ = blobs
    with pytest.raises(InvalidInputError):
        ClusteringRunner(refine=RecordingPrimitive()).run(X, 3, "kmeans++")


def test_get_params():
    params = ClusteringRunner(max_iter=50, n_local_trials=2).get_params()
    assert params["max_iter"] == 50
    assert params["n_local_trials"] == 2
    assert params["device"] == torch.device("cpu")


def test_float64_scores_survive_large_offset():
    X, _, C = make_three_blobs(seed=0)
    X64, C64 = X.astype(np.float64), C.astype(np.float64)

    base = ClusteringRunner().ground_truth(X64, C64)
    shifted = ClusteringRunner().ground_truth(X64 + 1e7, C64 + 1e7)

    assert shifted.centers.dtype == torch.float64
    assert torch.equal(shifted.labels, base.labels)
    assert shifted.total_within_ss == pytest.approx(base.total_within_ss, rel=1e-6)
    assert torch.allclose(shifted.centers - 1e7, base.centers, atol=1e-6)
