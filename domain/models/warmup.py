"""
Warmup configuration and result value objects.

The percentage tables and rep tiers are configuration data; the calculator
in ``domain.services.warmup_calculator`` only interprets them.
"""

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator


class WarmupStep(BaseModel):
    """One calculated warmup set."""

    weight: float = Field(..., gt=0)
    reps: int = Field(..., ge=1)
    percentage: float = Field(..., gt=0, lt=1, description="Fraction of working weight")

    model_config = {"frozen": True}


class WarmupStrategy(BaseModel):
    """
    A named, ordered warmup percentage table.

    Examples:
        >>> WarmupStrategy(name="standard", percentages=[0.4, 0.6, 0.8])
    """

    name: str = Field(..., min_length=1)
    percentages: List[float] = Field(default_factory=list, max_length=5)

    model_config = {"frozen": True}

    @field_validator("percentages")
    @classmethod
    def validate_percentages(cls, v: List[float]) -> List[float]:
        """Each step is a fraction of the working weight, ascending."""
        for p in v:
            if not 0 < p < 1:
                raise ValueError(f"Warmup percentage must be between 0 and 1, got {p}")
        if v != sorted(v):
            raise ValueError("Warmup percentages must be in ascending order")
        return v

    @property
    def step_count(self) -> int:
        return len(self.percentages)


class RepTier(BaseModel):
    """
    Rep rule for percentages below ``upper_bound``.

    Warmup reps are ``ceil(working_reps * multiplier)`` clamped to the
    configured floor/cap.
    """

    upper_bound: float = Field(..., gt=0, description="Exclusive upper percentage")
    multiplier: float = Field(..., gt=0)

    model_config = {"frozen": True}


# Default tables
STANDARD = WarmupStrategy(name="standard", percentages=[0.40, 0.60, 0.80])
CONSERVATIVE = WarmupStrategy(name="conservative", percentages=[0.30, 0.50, 0.70, 0.85])
MINIMAL = WarmupStrategy(name="minimal", percentages=[0.50, 0.75])
NONE = WarmupStrategy(name="none", percentages=[])

DEFAULT_STRATEGIES: Dict[str, WarmupStrategy] = {
    s.name: s for s in (STANDARD, CONSERVATIVE, MINIMAL, NONE)
}

DEFAULT_REP_TIERS: List[RepTier] = [
    RepTier(upper_bound=0.50, multiplier=1.25),
    RepTier(upper_bound=0.70, multiplier=1.0),
    RepTier(upper_bound=0.85, multiplier=0.6),
    RepTier(upper_bound=1.00, multiplier=0.3),
]


class WarmupConfig(BaseModel):
    """
    Tunable parameters of the warmup calculator.

    Attributes:
        min_working_weight: Working weights below this skip warmup entirely
        increment: Warmup weights are rounded to a multiple of this
        minimum_plate_weight: Rounded warmup weights below this are dropped
        rep_tiers: Ascending percentage tiers mapping to rep multipliers
        rep_cap: Maximum warmup reps
        rep_floor: Minimum warmup reps
        strategies: Named percentage tables
    """

    min_working_weight: float = Field(default=10.0, ge=0)
    increment: float = Field(default=2.5, gt=0)
    minimum_plate_weight: float = Field(default=5.0, ge=0)
    rep_tiers: List[RepTier] = Field(default_factory=lambda: list(DEFAULT_REP_TIERS))
    rep_cap: int = Field(default=12, ge=1)
    rep_floor: int = Field(default=1, ge=1)
    strategies: Dict[str, WarmupStrategy] = Field(
        default_factory=lambda: dict(DEFAULT_STRATEGIES)
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_tables(self) -> "WarmupConfig":
        if self.rep_floor > self.rep_cap:
            raise ValueError(
                f"rep_floor ({self.rep_floor}) cannot exceed rep_cap ({self.rep_cap})"
            )
        if not self.rep_tiers:
            raise ValueError("At least one rep tier is required")
        bounds = [t.upper_bound for t in self.rep_tiers]
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            raise ValueError("Rep tier bounds must be strictly ascending")
        return self
