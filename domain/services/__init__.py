"""
Pure domain services operating on the session aggregate.

- set_ordering_policy: set insertion/removal keeping order indexes 0..n-1
- warmup_calculator: warmup weights and reps from a working set
- group_round_tracker: superset/circuit round advancement
- session_lifecycle: session creation and state transitions
"""

from domain.services.warmup_calculator import WarmupCalculator, calculate_warmup_sets

__all__ = ["WarmupCalculator", "calculate_warmup_sets"]
