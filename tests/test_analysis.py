# tests/test_analysis.py
"""
U8 — Batch summaries and ground-truth comparison

Covers:
- summarize: five-number summary + mean, failed trials excluded
- Empty / all-failed batches raise EmptyBatchError
- Summaries do not depend on record order and leave the batch untouched
- compare_to_ground_truth: differences, ratios, zero ground truth, agreement
- ComparisonAnalyzer table + report
"""

from __future__ import annotations

import math

import pytest
import torch

from kseeding.base import ClusterResult, TrialRecord, TrialBatch, GROUND_TRUTH
from kseeding.exceptions import EmptyBatchError
from kseeding.experiments import summarize, compare_to_ground_truth, ComparisonAnalyzer


def _result(score, labels=None):
    if labels is None:
        labels = torch.tensor([0, 0, 1, 1])
    return ClusterResult(centers=torch.zeros(2, 2), labels=labels,
                         total_within_ss=float(score), n_iter=2)


def _batch(scores, strategy="seeded", failed=0):
    batch = TrialBatch(strategy=strategy, n_clusters=2)
    for i, s in enumerate(scores):
        batch.append(TrialRecord(trial_index=i, strategy=strategy, result=_result(s)))
    for j in range(failed):
        batch.append(TrialRecord(trial_index=len(scores) + j, strategy=strategy,
                                 error="ConvergenceFailure: stub"))
    return batch


def test_summarize_five_numbers():
    stats = summarize(_batch([5.0, 1.0, 3.0, 2.0, 4.0]))

    assert stats.strategy == "seeded"
    assert stats.n_trials == 5 and stats.n_failed == 0
    assert (stats.min, stats.p25, stats.median, stats.p75, stats.max) == (1.0, 2.0, 3.0, 4.0, 5.0)
    assert stats.mean == pytest.approx(3.0)


def test_summarize_interpolates():
    stats = summarize(_batch([1.0, 2.0, 3.0, 4.0]))
    assert stats.median == pytest.approx(2.5)
    assert stats.p25 == pytest.approx(1.75)


def test_summarize_single_trial():
    stats = summarize(_batch([7.5]))
    assert stats.min == stats.median == stats.max == 7.5


def test_summarize_excludes_failures():
    stats = summarize(_batch([2.0, 4.0], failed=3))
    assert stats.n_trials == 5
    assert stats.n_failed == 3
    assert stats.median == pytest.approx(3.0)


def test_summarize_empty_raises():
    with pytest.raises(EmptyBatchError):
        summarize(TrialBatch(strategy="standard", n_clusters=3))
    with pytest.raises(EmptyBatchError):
        summarize(_batch([], failed=2))


def test_summarize_order_independent_and_pure():
    batch = _batch([3.0, 9.0, 1.0, 4.0])
    shuffled = TrialBatch(strategy="seeded", n_clusters=2, records=list(reversed(batch.records)))
    before = list(batch.records)

    assert summarize(batch) == summarize(shuffled)
    assert summarize(batch) == summarize(batch)
    assert batch.records == before


def test_batch_rejects_foreign_strategy():
    batch = TrialBatch(strategy="seeded", n_clusters=2)
    with pytest.raises(ValueError):
        batch.append(TrialRecord(trial_index=0, strategy="standard", result=_result(1.0)))


def test_compare_ratios_and_differences():
    gt = _result(2.0)
    comp = compare_to_ground_truth(_batch([2.0, 2.01, 4.0]), gt)

    assert comp.ground_truth_score == 2.0
    assert comp.trial_indices == [0, 1, 2]
    assert torch.allclose(comp.differences, torch.tensor([0.0, 0.01, 2.0], dtype=torch.float64))
    assert torch.allclose(comp.ratios, torch.tensor([1.0, 1.005, 2.0], dtype=torch.float64))
    assert comp.fraction_within(0.01) == pytest.approx(2 / 3)
    assert comp.fraction_worse_than(0.5) == pytest.approx(1 / 3)


def test_compare_zero_ground_truth():
    comp = compare_to_ground_truth(_batch([0.0, 3.0]), _result(0.0))
    assert comp.ratios[0].item() == 1.0
    assert math.isinf(comp.ratios[1].item())


def test_compare_agreement_uses_labels():
    gt = _result(1.0, labels=torch.tensor([0, 0, 1, 1]))
    batch = TrialBatch(strategy="standard", n_clusters=2)
    batch.append(TrialRecord(0, "standard", result=_result(1.0, torch.tensor([1, 1, 0, 0]))))
    batch.append(TrialRecord(1, "standard", result=_result(1.0, torch.tensor([0, 1, 0, 1]))))

    comp = compare_to_ground_truth(batch, gt)
    assert comp.agreement[0].item() == pytest.approx(1.0)
    assert comp.agreement[1].item() == pytest.approx(-0.5)


def test_compare_skips_failed():
    comp = compare_to_ground_truth(_batch([1.0], failed=2), _result(1.0))
    assert comp.n_trials == 1


def test_analyzer_table_and_report():
    batches = {
        "standard": _batch([2.0, 6.0, 2.0, 2.0], strategy="standard"),
        "seeded": _batch([2.0, 2.0, 2.0, 2.01], strategy="seeded"),
    }
    gt = _result(2.0)
    analyzer = ComparisonAnalyzer(rel_tol=0.01, margin=0.5)

    rows = analyzer.summary_table(batches, gt)
    assert [r.strategy for r in rows] == ["standard", "seeded", GROUND_TRUTH]
    assert rows[-1].median == 2.0

    text = analyzer.format_table(rows)
    lines = text.splitlines()
    assert lines[0].startswith("strategy")
    assert len(lines) == 2 + len(rows)
    assert GROUND_TRUTH in text

    report = analyzer.report(batches, gt)
    assert report["standard"]["fraction_worse_than_margin"] == pytest.approx(0.25)
    assert report["seeded"]["fraction_within_tol"] == pytest.approx(1.0)
    assert report["seeded"]["mean_agreement"] == pytest.approx(1.0)


def test_summary_as_dict():
    d = summarize(_batch([1.0, 2.0])).as_dict()
    assert set(d) == {"strategy", "n_trials", "n_failed", "min", "p25",
                      "median", "p75", "max", "mean"}


def test_cluster_result_owns_its_tensors():
    centers = torch.zeros(2, 2)
    labels = torch.tensor([0, 1])
    metadata = {"n_degenerate_draws": 0}
    result = ClusterResult(centers=centers, labels=labels, total_within_ss=0.0,
                           n_iter=2, metadata=metadata)

    centers.fill_(5.0)
    labels[0] = 1
    metadata["n_degenerate_draws"] = 3

    assert torch.equal(result.centers, torch.zeros(2, 2))
    assert result.labels.tolist() == [0, 1]
    assert result.metadata["n_degenerate_draws"] == 0


def test_report_median_matches_summary_median():
    batch = _batch([1.0, 2.0, 3.0, 4.0])
    report = ComparisonAnalyzer().report([batch], _result(1.0))

    assert report["seeded"]["median_ratio"] == pytest.approx(2.5)
    assert report["seeded"]["median_ratio"] == pytest.approx(summarize(batch).median)
