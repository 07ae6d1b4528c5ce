"""
Warmup set calculator.

Turns a working weight/reps pair and a percentage strategy into a list of
lighter warmup sets. Percentage tables and rep tiers come from
``WarmupConfig``; this module only interprets them.

Usage:
    >>> calculator = WarmupCalculator()
    >>> steps = calculator.calculate(100, 8, "standard")
    >>> [(s.weight, s.reps) for s in steps]
    [(40.0, 10), (60.0, 8), (80.0, 5)]
"""

import logging
import math
from typing import List, Optional, Tuple, Union

from pydantic import ValidationError

from domain.exceptions import InvalidInput
from domain.models.warmup import WarmupConfig, WarmupStep, WarmupStrategy

logger = logging.getLogger(__name__)

CUSTOM_PREFIX = "custom:"

StrategyLike = Union[str, WarmupStrategy]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


class WarmupCalculator:
    """
    Deterministic warmup generator.

    Args:
        config: Calculator configuration. Defaults to ``WarmupConfig()``.
    """

    def __init__(self, config: Optional[WarmupConfig] = None):
        self.config = config or WarmupConfig()

    # -------------------------------------------------------------------------
    # Strategy resolution
    # -------------------------------------------------------------------------

    def resolve_strategy(self, strategy: StrategyLike) -> WarmupStrategy:
        """
        Turn a strategy name or ``custom:p1,p2`` string into a strategy.

        Raises:
            InvalidInput: For an unknown name or malformed custom list.
        """
        if isinstance(strategy, WarmupStrategy):
            return strategy

        name = strategy.strip().lower()
        if name.startswith(CUSTOM_PREFIX):
            return self._parse_custom(name[len(CUSTOM_PREFIX):])

        resolved = self.config.strategies.get(name)
        if resolved is None:
            known = ", ".join(sorted(self.config.strategies))
            raise InvalidInput(
                f"Unknown warmup strategy {strategy!r}. Known: {known}, custom:<p1>,<p2>,..."
            )
        return resolved

    @staticmethod
    def _parse_custom(raw: str) -> WarmupStrategy:
        parts = [p.strip() for p in raw.split(",") if p.strip()]
        if not 1 <= len(parts) <= 5:
            raise InvalidInput(
                f"Custom warmup needs 1 to 5 percentages, got {len(parts)}"
            )
        try:
            percentages = sorted(float(p) for p in parts)
            return WarmupStrategy(name="custom", percentages=percentages)
        except (ValueError, ValidationError) as e:
            raise InvalidInput(f"Invalid custom warmup percentages {raw!r}: {e}") from e

    # -------------------------------------------------------------------------
    # Calculation
    # -------------------------------------------------------------------------

    def reps_for(self, working_reps: int, percentage: float) -> int:
        """Warmup reps for one percentage step, clamped to floor/cap."""
        multiplier = self.config.rep_tiers[-1].multiplier
        for tier in self.config.rep_tiers:
            if percentage < tier.upper_bound:
                multiplier = tier.multiplier
                break
        reps = math.ceil(round(working_reps * multiplier, 6))
        return max(self.config.rep_floor, min(self.config.rep_cap, reps))

    def round_weight(self, raw: float) -> float:
        """Round a raw weight to the nearest increment (halves round up)."""
        increment = self.config.increment
        return round(round_half_up(raw / increment) * increment, 2)

    def calculate(
        self,
        working_weight: float,
        working_reps: int,
        strategy: StrategyLike = "standard",
    ) -> List[WarmupStep]:
        """
        Calculate warmup sets for one working weight.

        Steps whose rounded weight is below the minimum plate weight, or not
        lighter than the working weight, are dropped. Results are lightest
        first.

        Args:
            working_weight: Weight of the first working set.
            working_reps: Reps of the first working set.
            strategy: Strategy name, ``custom:...`` string or WarmupStrategy.

        Returns:
            Warmup steps (possibly empty).

        Raises:
            InvalidInput: For negative input or an unknown strategy.
        """
        if working_weight < 0 or working_reps < 0:
            raise InvalidInput(
                f"Working weight and reps must not be negative: "
                f"{working_weight} x {working_reps}"
            )
        resolved = self.resolve_strategy(strategy)

        if working_weight < self.config.min_working_weight:
            return []

        steps = []
        for percentage in resolved.percentages:
            rounded = self.round_weight(working_weight * percentage)
            if rounded <= 0 or rounded < self.config.minimum_plate_weight:
                continue
            if rounded >= working_weight:
                continue
            steps.append(
                WarmupStep(
                    weight=rounded,
                    reps=self.reps_for(working_reps, percentage),
                    percentage=percentage,
                )
            )

        logger.debug(
            f"Warmup for {working_weight:g} x {working_reps} ({resolved.name}): "
            f"{[(s.weight, s.reps) for s in steps]}"
        )
        return steps

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    def recommend(self, working_weight: float) -> Tuple[WarmupStrategy, int]:
        """Return the recommended strategy and warmup set count for a weight."""
        if working_weight < 40:
            return self.resolve_strategy("minimal"), 1
        if working_weight < 80:
            return self.resolve_strategy("standard"), 2
        if working_weight < 120:
            return self.resolve_strategy("standard"), 3
        return self.resolve_strategy("conservative"), 4

    def recommended_strategy(self, working_weight: float) -> WarmupStrategy:
        return self.recommend(working_weight)[0]

    def recommended_set_count(self, working_weight: float) -> int:
        return self.recommend(working_weight)[1]


def calculate_warmup_sets(
    working_weight: float,
    working_reps: int,
    strategy: StrategyLike = "standard",
    config: Optional[WarmupConfig] = None,
) -> List[WarmupStep]:
    """Convenience wrapper around ``WarmupCalculator(config).calculate``."""
    return WarmupCalculator(config).calculate(working_weight, working_reps, strategy)
