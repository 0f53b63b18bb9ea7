"""
Input validation and random-state utilities.

Provides functions for validating data and centers before seeding or
refinement, plus helpers for turning seeds into independent torch generators.
"""

from typing import Optional, Union, List
import torch
from torch import Tensor
import numpy as np

from ..exceptions import InvalidInputError
from ..base.data_structures import STRATEGIES


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: torch.dtype = torch.float32,
                  device: Optional[torch.device] = None,
                  ensure_2d: bool = True,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1,
                  copy: bool = False) -> Tensor:
    """Validate and convert input data to tensor.

    Args:
        X: Input data (tensor, numpy array, or list)
        dtype: Target data type
        device: Target device
        ensure_2d: Whether to ensure 2D shape
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of samples required
        copy: Whether to force a copy

    Returns:
        Validated tensor

    Raises:
        InvalidInputError: If validation fails
    """
    # Convert to tensor
    if isinstance(X, Tensor):
        if copy or X.dtype != dtype or (device is not None and X.device != device):
            X = X.to(dtype=dtype, device=device, copy=copy)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.ascontiguousarray(X)).to(dtype=dtype, device=device)
    elif isinstance(X, list):
        X = torch.tensor(X, dtype=dtype, device=device)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if ensure_2d:
        if X.dim() == 1:
            X = X.unsqueeze(1)
        elif X.dim() != 2:
            raise InvalidInputError(f"Expected 2D array, got {X.dim()}D")

        n_samples, n_features = X.shape
        if n_samples < max(1, ensure_min_samples):
            raise InvalidInputError(f"Found {n_samples} samples, but need at least "
                                    f"{max(1, ensure_min_samples)}")
        if n_features < 1:
            raise InvalidInputError("Data has no features")

    if ensure_finite:
        if torch.isnan(X).any():
            raise InvalidInputError("Input contains NaN values")
        if torch.isinf(X).any():
            raise InvalidInputError("Input contains infinite values")

    return X


_NUMPY_FLOAT_DTYPES = {
    np.float16: torch.float16,
    np.float32: torch.float32,
    np.float64: torch.float64,
}


def float_dtype(X: Union[Tensor, np.ndarray, list]) -> torch.dtype:
    """Floating dtype to validate ``X`` with: its own if floating, else float32."""
    if isinstance(X, Tensor) and X.is_floating_point():
        return X.dtype
    if isinstance(X, np.ndarray) and np.issubdtype(X.dtype, np.floating):
        return _NUMPY_FLOAT_DTYPES.get(X.dtype.type, torch.float64)
    return torch.float32


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Raises:
        TypeError: If n_clusters is not an integer
        InvalidInputError: If n_clusters < 1 or n_clusters > n_samples
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise InvalidInputError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise InvalidInputError(f"n_clusters ({n_clusters}) cannot be larger than "
                                f"n_samples ({n_samples})")


def check_strategy(strategy: str) -> str:
    if strategy not in STRATEGIES:
        raise InvalidInputError(f"strategy must be one of {list(STRATEGIES)}, got '{strategy}'")
    return strategy


def validate_centers(centers: Union[Tensor, np.ndarray, List[List[float]]],
                     n_features: int,
                     n_clusters: Optional[int] = None,
                     device: Optional[torch.device] = None,
                     dtype: Optional[torch.dtype] = None) -> Tensor:
    """Validate an explicit (k, d) matrix of starting centers.

    ``dtype`` defaults to the centers' own floating dtype.
    """
    if dtype is None:
        dtype = float_dtype(centers)
    centers = validate_data(centers, dtype=dtype, device=device, ensure_2d=True)

    if centers.shape[1] != n_features:
        raise InvalidInputError(f"Centers have dimension {centers.shape[1]}, "
                                f"but data has dimension {n_features}")
    if n_clusters is not None and centers.shape[0] != n_clusters:
        raise InvalidInputError(f"Got {centers.shape[0]} centers, "
                                f"but n_clusters={n_clusters}")
    return centers


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> Optional[torch.Generator]:
    """Create generator from random state.

    Args:
        random_state: Seed or generator

    Returns:
        Generator or None (None means torch's global RNG)
    """
    if random_state is None:
        return None
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def spawn_seeds(random_state: Optional[Union[int, torch.Generator]], n: int) -> List[int]:
    """Derive ``n`` statistically independent seeds from one random state.

    Uses NumPy's ``SeedSequence.spawn`` so that child streams do not overlap.
    The i-th seed depends only on ``random_state`` and i.

    Args:
        random_state: Root seed, a generator to draw the root seed from, or
            None for fresh OS entropy
        n: Number of seeds

    Returns:
        List of ``n`` non-negative ints usable with ``torch.Generator.manual_seed``

    Raises:
        TypeError: ``random_state`` is not None, an int or a Generator
    """
    generator = check_random_state(random_state)
    if isinstance(random_state, torch.Generator):
        random_state = int(torch.randint(2 ** 62, (1,), generator=generator).item())

    root = np.random.SeedSequence(None if random_state is None else int(random_state))
    return [int(child.generate_state(1, dtype=np.uint64)[0] >> np.uint64(1))
            for child in root.spawn(n)]


def make_generator(seed: int) -> torch.Generator:
    """CPU torch generator seeded with ``seed``."""
    generator = torch.Generator()
    generator.manual_seed(seed)
    return generator
