"""Error types raised by the engine.

Probabilistic outcomes (failed enhancement, downgrade, destruction, no drop)
are results, not errors. These exceptions cover caller misuse only.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for engine errors."""


class InvalidItemState(EngineError, ValueError):
    """An item is malformed or missing required fields."""


class MaxLevelReached(EngineError):
    """Enhancement requested on an item already at the level cap."""

    def __init__(self, level: int, max_level: int):
        self.level = level
        self.max_level = max_level
        super().__init__(
            f"Item is already at maximum enhancement level ({level}/{max_level})"
        )


class InsufficientFunds(EngineError):
    """Credits are below the cost of the requested action."""

    def __init__(self, required: int, available: int, action: str = "action"):
        self.required = required
        self.available = available
        self.action = action
        super().__init__(
            f"Insufficient credits for {action}: required {required}, available {available}"
        )


class DestructionPreventionUnavailable(EngineError):
    """Destruction prevention requested below its minimum level."""

    def __init__(self, level: int, min_level: int):
        self.level = level
        self.min_level = min_level
        super().__init__(
            f"Destruction prevention requires level {min_level}+ (item is +{level})"
        )


class UnknownStage(EngineError, ValueError):
    """A stage outside the defined range was requested in strict mode."""

    def __init__(self, stage: int, min_stage: int, max_stage: int):
        self.stage = stage
        super().__init__(f"Stage {stage} is outside {min_stage}..{max_stage}")


class InvalidTurn(EngineError):
    """An action was requested out of turn or after the battle ended."""

    def __init__(self, reason: str, result: Optional[str] = None):
        self.reason = reason
        self.result = result
        super().__init__(reason)


class SynthesisUnavailable(EngineError, ValueError):
    """Synthesis requested for a grade that cannot be synthesized now."""

    def __init__(self, grade: str, reason: str):
        self.grade = grade
        self.reason = reason
        super().__init__(f"Cannot synthesize {grade} items: {reason}")
