# tests/utils.py
"""
Small, reusable helpers used across the kseeding test suite.

Functions:
- to_numpy(x): convert a tensor or array-like to a numpy array.
- row_indices_in(rows, X): index of the matching row of X for each row (or -1).
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, List

import numpy as np
import torch


def to_numpy(x: Any) -> np.ndarray:
    """Convert a torch tensor (any device) or array-like to numpy."""
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def row_indices_in(rows: Any, X: Any) -> List[int]:
    """
    For each row of ``rows``, the index of the first identical row of ``X``,
    or -1 if there is none. Comparison is exact.
    """
    rows_np = to_numpy(rows)
    X_np = to_numpy(X)
    out = []
    for r in rows_np:
        matches = np.nonzero(np.all(X_np == r, axis=1))[0]
        out.append(int(matches[0]) if len(matches) else -1)
    return out


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("batch", {"n": 300, "k": 3, "trials": 1000}):
    ...     runner.run_batch(X, 3, 1000, "seeded")

    Output
    ------
    [timing] batch {"n":300,"k":3,"trials":1000} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=str)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
