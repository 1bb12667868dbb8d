"""Stage, boss and drop-table data models."""

from typing import Dict

from pydantic import BaseModel, Field, field_validator

from .item import GRADE_ORDER, ItemGrade


# Allowed gap between a drop table's total and 1.0
DROP_TABLE_TOLERANCE = 1e-6


class BossDescriptor(BaseModel):
    """Boss generated for a stage; read-only input to combat."""
    name: str
    max_hp: int = Field(..., gt=0)
    attack: int = Field(..., gt=0)
    defense: int = Field(..., ge=0)
    stage: int = Field(..., ge=1)

    model_config = {"frozen": True}


class DropRateTable(BaseModel):
    """
    Grade probabilities for a single drop, given that a drop happened.

    Every probability lies in [0, 1] and the table sums to 1.0 within
    DROP_TABLE_TOLERANCE. Missing grades are treated as 0.
    """
    rates: Dict[ItemGrade, float]

    model_config = {"frozen": True}

    @field_validator("rates")
    @classmethod
    def validate_rates(cls, rates: Dict[ItemGrade, float]) -> Dict[ItemGrade, float]:
        for grade, rate in rates.items():
            if not 0.0 <= rate <= 1.0:
                raise ValueError(f"Probability for {grade} out of range: {rate}")
        total = sum(rates.values())
        if abs(total - 1.0) > DROP_TABLE_TOLERANCE:
            raise ValueError(f"Drop rates must sum to 1.0 (got {total:.6f})")
        return rates

    @classmethod
    def from_sequence(cls, *rates: float) -> "DropRateTable":
        """Build from probabilities listed commonest grade first."""
        return cls(rates=dict(zip(GRADE_ORDER, rates)))

    def get(self, grade: ItemGrade) -> float:
        return self.rates.get(grade, 0.0)

    @property
    def total(self) -> float:
        return sum(self.rates.values())


class StageTheme(BaseModel):
    """Presentation theme shared by a band of ten stages."""
    theme: str
    description: str
    color: str

    model_config = {"frozen": True}


class StageInfo(BaseModel):
    """Read-only configuration for one stage."""
    stage: int = Field(..., ge=1)
    required_attack: int = Field(..., gt=0)
    required_defense: int = Field(..., gt=0)
    credit_multiplier: float = Field(..., gt=0)
    turn_limit: int = Field(..., gt=0)
    clear_reward: int = Field(..., ge=0)
    stage_clear_drop_rates: DropRateTable
    idle_drop_rates: DropRateTable
    boss: BossDescriptor

    model_config = {"frozen": True}
