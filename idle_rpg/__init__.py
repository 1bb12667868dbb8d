"""Progression simulation engine for an incremental RPG.

Provides the pure computations behind a 100-stage idle game:
- Stage curves (requirements, bosses, drop tables, credit multipliers)
- Turn-based combat resolution and battle simulation
- Item enhancement, loot drops, gacha draws and item valuation
"""

__version__ = "0.1.0"
