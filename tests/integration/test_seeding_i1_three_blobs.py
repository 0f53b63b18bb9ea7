import pytest
import torch

from utils import time_block
from data_gen import make_three_blobs

from kseeding import BatchExperimentRunner, ClusteringRunner, ComparisonAnalyzer


@pytest.fixture(scope="module")
def experiment():
    """
    Three unit-variance blobs 30 apart on a line, 100 points each, plus 1000
    trials per strategy and the run started from the generating centers.
    """
    seed = 1337
    X, y, C = make_three_blobs(n_per=100, spacing=30.0, seed=seed)
    X = torch.as_tensor(X)

    runner = BatchExperimentRunner(random_state=seed)
    with time_block("I1-three-blobs-batches", meta={"n": X.shape[0], "K": 3, "trials": 1000}):
        batches = runner.run_comparison(X, 3, n_iter=1000)
    ground_truth = ClusteringRunner().ground_truth(X, C)
    return X, y, batches, ground_truth


def test_i1_ground_truth_recovers_blobs(experiment):
    X, y, _, gt = experiment
    from kseeding.utils import adjusted_rand_score

    assert gt.converged
    assert adjusted_rand_score(torch.as_tensor(y), gt.labels) == pytest.approx(1.0)
    # Unit variance in 2D: about 2 per point
    assert 1.5 * X.shape[0] < gt.total_within_ss < 2.5 * X.shape[0]


def test_i1_seeded_matches_ground_truth(experiment):
    """
    K-means++ starts land in the ground-truth basin in at least 99% of trials.
    """
    _, _, batches, gt = experiment
    comparison = ComparisonAnalyzer().compare_to_ground_truth(batches["seeded"], gt)

    assert batches["seeded"].n_failed <= 10
    assert comparison.fraction_within(0.01) >= 0.99


def test_i1_standard_often_bad(experiment):
    """
    Random starts end more than 50% above the ground truth in over 10% of trials.
    """
    _, _, batches, gt = experiment
    comparison = ComparisonAnalyzer().compare_to_ground_truth(batches["standard"], gt)

    assert comparison.fraction_worse_than(0.5) > 0.10


def test_i1_seeded_beats_standard_in_summary(experiment):
    _, _, batches, gt = experiment
    analyzer = ComparisonAnalyzer()
    standard = analyzer.summarize(batches["standard"])
    seeded = analyzer.summarize(batches["seeded"])

    assert seeded.median == pytest.approx(gt.total_within_ss, rel=0.01)
    assert seeded.mean < standard.mean
    assert standard.max > 1.5 * gt.total_within_ss

    text = analyzer.format_table(analyzer.summary_table(batches, gt))
    print("\n" + text)
    assert "standard" in text and "seeded" in text


def test_i1_report_agreement(experiment):
    _, _, batches, gt = experiment
    report = ComparisonAnalyzer().report(batches, gt)

    assert report["seeded"]["mean_agreement"] > 0.98
    assert report["seeded"]["mean_agreement"] > report["standard"]["mean_agreement"]
    assert report["seeded"]["median_ratio"] == pytest.approx(1.0, abs=0.01)
