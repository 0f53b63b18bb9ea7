"""
Clustering quality metrics.

The within-cluster sum of squares is the score every trial is judged by; the
external metrics compare a trial's labels against a reference labelling.
"""

import torch
from torch import Tensor


def within_cluster_ss(X: Tensor, labels: Tensor, centers: Tensor) -> Tensor:
    """Per-cluster sum of squared distances to the cluster center.

    Args:
        X: (n, d) data points
        labels: (n,) cluster labels in [0, k)
        centers: (k, d) cluster centers

    Returns:
        (k,) tensor; clusters with no points contribute 0
    """
    n_clusters = centers.shape[0]
    diff = X - centers[labels]
    point_ss = torch.sum(diff * diff, dim=1)
    totals = torch.zeros(n_clusters, dtype=point_ss.dtype, device=X.device)
    return totals.index_add_(0, labels, point_ss)


def inertia(X: Tensor, labels: Tensor, centers: Tensor) -> float:
    """Compute sum of squared distances to assigned centers (inertia).

    Args:
        X: (n, d) data points
        labels: (n,) cluster labels
        centers: (k, d) cluster centers

    Returns:
        Total inertia (lower is better)
    """
    return within_cluster_ss(X, labels, centers).sum().item()


# External metrics (require reference labels)

def contingency_matrix(labels_true: Tensor, labels_pred: Tensor) -> Tensor:
    """Build contingency matrix for comparing clusterings.

    Args:
        labels_true: (n,) true labels
        labels_pred: (n,) predicted labels

    Returns:
        Contingency matrix C where C[i,j] is the number of samples
        with true label i and predicted label j
    """
    labels_true = labels_true.long()
    labels_pred = labels_pred.long().to(labels_true.device)
    if labels_true.shape != labels_pred.shape:
        raise ValueError(f"Label shapes differ: {tuple(labels_true.shape)} vs "
                         f"{tuple(labels_pred.shape)}")

    n_true = labels_true.max().item() + 1
    n_pred = labels_pred.max().item() + 1

    flat = labels_true * n_pred + labels_pred
    counts = torch.bincount(flat, minlength=n_true * n_pred)
    return counts.reshape(n_true, n_pred)


def adjusted_rand_score(labels_true: Tensor, labels_pred: Tensor) -> float:
    """Compute Adjusted Rand Index.

    ARI is 1.0 for identical partitions (up to relabelling), about 0.0 for
    random labelling.

    Args:
        labels_true: (n,) ground truth labels
        labels_pred: (n,) predicted labels

    Returns:
        ARI score in [-1, 1]
    """
    contingency = contingency_matrix(labels_true, labels_pred).double()

    row_sum = contingency.sum(dim=1)
    col_sum = contingency.sum(dim=0)
    n = contingency.sum()

    sum_comb = torch.sum(contingency * (contingency - 1)) / 2
    sum_comb_rows = torch.sum(row_sum * (row_sum - 1)) / 2
    sum_comb_cols = torch.sum(col_sum * (col_sum - 1)) / 2

    if n < 2:
        return 1.0

    expected_index = sum_comb_rows * sum_comb_cols / (n * (n - 1) / 2)
    max_index = (sum_comb_rows + sum_comb_cols) / 2

    if max_index - expected_index == 0:
        return 1.0

    ari = (sum_comb - expected_index) / (max_index - expected_index)
    return ari.item()
