"""
Convergence criteria for the refinement loop.

Lloyd's algorithm has converged when an assignment step moves no point; a
relative change in objective can be used as a looser stopping rule.
"""

from typing import Dict, Any

from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


class ChangeInAssignments(ConvergenceCriterion):
    """Convergence based on fraction of points that change clusters."""

    def __init__(self, max_change_fraction: float = 0.0,
                 patience: int = 1):
        """
        Args:
            max_change_fraction: Largest fraction of points allowed to change
                cluster for a step to count as stable (0.0 means no change)
            patience: Number of consecutive stable steps before declaring convergence
        """
        super().__init__()
        self.max_change_fraction = max_change_fraction
        self.patience = patience
        self._prev_assignments = None
        self._stable_count = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if assignments have stabilized."""
        current_assignments: Tensor = current_state['assignments']

        if self._prev_assignments is None:
            self._prev_assignments = current_assignments.clone()
            return False

        n_changed = (current_assignments != self._prev_assignments).sum().item()
        n_total = len(current_assignments)
        change_fraction = n_changed / n_total

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed,
            'change_fraction': change_fraction
        })

        if change_fraction <= self.max_change_fraction:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        self._prev_assignments = current_assignments.clone()

        return converged

    def reset(self):
        super().reset()
        self._prev_assignments = None
        self._stable_count = 0


class ChangeInObjective(ConvergenceCriterion):
    """Convergence based on relative change in objective function."""

    def __init__(self, rel_tol: float = 1e-4, abs_tol: float = 1e-8,
                 patience: int = 1):
        """
        Args:
            rel_tol: Relative tolerance for objective change
            abs_tol: Absolute tolerance for objective change
            patience: Number of iterations to wait before convergence
        """
        super().__init__()
        self.rel_tol = rel_tol
        self.abs_tol = abs_tol
        self.patience = patience
        self._prev_objective = None
        self._stable_count = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if objective has stabilized."""
        current_objective = current_state['objective']

        if self._prev_objective is None:
            self._prev_objective = current_objective
            return False

        abs_change = abs(current_objective - self._prev_objective)

        if abs(self._prev_objective) > 1e-10:
            rel_change = abs_change / abs(self._prev_objective)
        else:
            rel_change = abs_change

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'objective': current_objective,
            'abs_change': abs_change,
            'rel_change': rel_change
        })

        if abs_change < self.abs_tol or rel_change < self.rel_tol:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        self._prev_objective = current_objective

        return converged

    def reset(self):
        super().reset()
        self._prev_objective = None
        self._stable_count = 0


class CombinedCriterion(ConvergenceCriterion):
    """Combine multiple convergence criteria with AND/OR logic."""

    def __init__(self, criteria: list, mode: str = 'any'):
        """
        Args:
            criteria: List of convergence criteria
            mode: 'any' (OR) or 'all' (AND)
        """
        super().__init__()
        self.criteria = criteria
        self.mode = mode

        if mode not in ['any', 'all']:
            raise ValueError(f"Mode must be 'any' or 'all', got {mode}")

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check all criteria and combine results."""
        # Every criterion sees every step so their internal state stays in sync
        results = [criterion.check(current_state) for criterion in self.criteria]

        if self.mode == 'any':
            converged = any(results)
        else:
            converged = all(results)

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'individual_results': results,
            'converged': converged
        })

        return converged

    def reset(self):
        """Reset all sub-criteria."""
        super().reset()
        for criterion in self.criteria:
            criterion.reset()
