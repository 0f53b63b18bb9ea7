"""
Synthetic Gaussian cluster data for seeding experiments.

Returns NumPy arrays, matching the rest of the package's accepted inputs.
"""

from typing import Optional, Tuple
import numpy as np

NDArray = np.ndarray


def default_three_blob_centers(spacing: float = 30.0) -> NDArray:
    """Three well-separated centers on a line in the plane.

    With unit-variance blobs this layout has a stable bad local minimum for
    Lloyd's algorithm (one end blob split in two, the other two merged), which
    a random start hits often and a K-means++ start almost never.
    """
    return np.array([[0.0, 0.0],
                     [spacing, 0.0],
                     [2.0 * spacing, 0.0]], dtype=np.float32)


def make_gaussian_clusters(
    n_per: int = 100,
    centers: Optional[NDArray] = None,
    std: float = 1.0,
    seed: Optional[int] = None,
    shuffle: bool = False,
) -> Tuple[NDArray, NDArray, NDArray]:
    """
    Draw isotropic Gaussian clusters around given centers.

    Parameters
    ----------
    n_per : int, default=100
        Number of points per cluster.
    centers : (k, d) ndarray or None
        Generating centers; defaults to ``default_three_blob_centers()``.
    std : float, default=1.0
        Standard deviation of every coordinate.
    seed : int or None
        RNG seed for reproducibility.
    shuffle : bool, default=False
        Shuffle rows (and labels) instead of keeping clusters contiguous.

    Returns
    -------
    X : (k*n_per, d) ndarray, float32
        Data matrix.
    y : (k*n_per,) ndarray, int64
        Generating cluster of each row.
    centers : (k, d) ndarray, float32
        The generating centers (ground truth).
    """
    if n_per < 1:
        raise ValueError(f"n_per must be positive, got {n_per}")
    if std < 0:
        raise ValueError(f"std must be non-negative, got {std}")

    rng = np.random.default_rng(seed)
    if centers is None:
        centers = default_three_blob_centers()
    centers = np.asarray(centers, dtype=np.float32)
    if centers.ndim != 2:
        raise ValueError(f"centers must be 2D, got shape {centers.shape}")
    k, d = centers.shape

    X = np.vstack([
        c + std * rng.normal(size=(n_per, d)) for c in centers
    ]).astype(np.float32)
    y = np.repeat(np.arange(k, dtype=np.int64), n_per)

    if shuffle:
        perm = rng.permutation(X.shape[0])
        X, y = X[perm], y[perm]

    return X, y, centers
