"""Utility functions for seeding experiments."""

from .convergence import (
    ChangeInAssignments,
    ChangeInObjective,
    CombinedCriterion
)

from .metrics import (
    within_cluster_ss,
    inertia,
    contingency_matrix,
    adjusted_rand_score
)

from .validation import (
    validate_data,
    validate_centers,
    float_dtype,
    check_n_clusters,
    check_strategy,
    check_random_state,
    spawn_seeds,
    make_generator
)

from .device import (
    get_default_device,
    parse_device
)

__all__ = [
    # Convergence criteria
    'ChangeInAssignments',
    'ChangeInObjective',
    'CombinedCriterion',

    # Metrics
    'within_cluster_ss',
    'inertia',
    'contingency_matrix',
    'adjusted_rand_score',

    # Validation
    'validate_data',
    'validate_centers',
    'float_dtype',
    'check_n_clusters',
    'check_strategy',
    'check_random_state',
    'spawn_seeds',
    'make_generator',

    # Device management
    'get_default_device',
    'parse_device'
]
