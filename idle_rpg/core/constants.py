"""Idle RPG Game Constants."""

from typing import Final

from ..data.models.item import ItemGrade, ItemType, MAX_ENHANCEMENT_LEVEL

# =============================================================================
# STAGES
# =============================================================================
MIN_STAGE: Final[int] = 1
MAX_STAGE: Final[int] = 100

# Stage ranges used to select drop tables (inclusive bounds)
STAGE_SEGMENTS: Final[list[tuple[int, int]]] = [
    (1, 5),
    (6, 15),
    (16, 30),
    (31, 50),
    (51, 75),
    (76, 100),
]

# Output floors
MIN_STAT: Final[int] = 1
MIN_BOSS_HP: Final[int] = 50

# Boss HP targets this share of the turn limit for a reference player
TARGET_TURN_RATIO: Final[float] = 0.5

# =============================================================================
# TURN LIMIT
# =============================================================================
BASE_TURN_LIMIT: Final[int] = 30
TURN_LIMIT_DECAY: Final[float] = 0.15  # Turns lost per stage
MIN_TURN_LIMIT: Final[int] = 15

# =============================================================================
# IDLE DROPS
# =============================================================================
IDLE_DROP_BASE_RATE: Final[float] = 0.001  # 0.1% at stage 1
IDLE_DROP_MAX_RATE: Final[float] = 0.002   # 0.2% at stage 100

# =============================================================================
# DROP TABLES
# =============================================================================
# Grade probabilities per stage segment, commonest first:
# [common, rare, epic, legendary, mythic]. Every row sums to exactly 1.0.
STAGE_CLEAR_DROP_RATES: Final[list[list[float]]] = [
    [0.70, 0.22, 0.07, 0.01,  0.0],    # 1-5
    [0.62, 0.25, 0.10, 0.028, 0.002],  # 6-15
    [0.55, 0.27, 0.13, 0.045, 0.005],  # 16-30
    [0.47, 0.30, 0.16, 0.06,  0.01],   # 31-50
    [0.40, 0.32, 0.19, 0.07,  0.02],   # 51-75
    [0.32, 0.34, 0.22, 0.09,  0.03],   # 76-100
]

# Idle tables lean toward common/rare
IDLE_DROP_RATES: Final[list[list[float]]] = [
    [0.80, 0.16, 0.035, 0.005, 0.0],    # 1-5
    [0.76, 0.18, 0.05,  0.009, 0.001],  # 6-15
    [0.72, 0.20, 0.065, 0.013, 0.002],  # 16-30
    [0.68, 0.22, 0.075, 0.021, 0.004],  # 31-50
    [0.64, 0.24, 0.09,  0.024, 0.006],  # 51-75
    [0.60, 0.26, 0.10,  0.03,  0.01],   # 76-100
]

# Per-stage growth applied to dropped item stats
STAGE_STAT_GROWTH: Final[float] = 0.2

# Random variation applied to each rolled stat (0.9x - 1.1x)
STAT_VARIATION_MIN: Final[float] = 0.9
STAT_VARIATION_SPAN: Final[float] = 0.2

# Smallest non-zero value for percentage stats
MIN_PERCENT_STAT: Final[float] = 0.001

# =============================================================================
# COMBAT
# =============================================================================
DEFENSE_CONSTANT: Final[int] = 100    # reduction = def / (def + 100)
MIN_DAMAGE_RATIO: Final[float] = 0.1  # At least 10% of attack always lands

PLAYER_BASE_HP: Final[int] = 100
HP_PER_DEFENSE: Final[int] = 2

# =============================================================================
# ENHANCEMENT
# =============================================================================
GUARANTEED_SUCCESS_MAX_LEVEL: Final[int] = 11

# Success rate for each target level above the guaranteed range
SUCCESS_RATES: Final[dict[int, float]] = {
    12: 0.90,
    13: 0.85,
    14: 0.80,
    15: 0.75,
    16: 0.70,
    17: 0.65,
    18: 0.60,
    19: 0.55,
    20: 0.50,
    21: 0.45,
    22: 0.40,
    23: 0.35,
    24: 0.30,
    25: 0.25,
}
MIN_SUCCESS_RATE: Final[float] = 0.25

ENHANCEMENT_COST_MULTIPLIER: Final[dict[ItemGrade, float]] = {
    ItemGrade.COMMON: 1.0,
    ItemGrade.RARE: 1.3,
    ItemGrade.EPIC: 1.7,
    ItemGrade.LEGENDARY: 2.2,
    ItemGrade.MYTHIC: 3.0,
}

# Primary-stat gain per level before level efficiency
GRADE_BASE_INCREASE: Final[dict[ItemGrade, int]] = {
    ItemGrade.COMMON: 3,
    ItemGrade.RARE: 5,
    ItemGrade.EPIC: 8,
    ItemGrade.LEGENDARY: 12,
    ItemGrade.MYTHIC: 18,
}

# Scale from flat gain to additional attack chance
PERCENT_GAIN_SCALE: Final[float] = 0.0005

# The one stat enhancement raises for each slot
PRIMARY_STATS: Final[dict[ItemType, str]] = {
    ItemType.HELMET: "defense",
    ItemType.ARMOR: "defense",
    ItemType.PANTS: "defense",
    ItemType.GLOVES: "additional_attack_chance",
    ItemType.SHOES: "additional_attack_chance",
    ItemType.SHOULDER: "additional_attack_chance",
    ItemType.EARRING: "defense_penetration",
    ItemType.RING: "defense_penetration",
    ItemType.NECKLACE: "defense_penetration",
    ItemType.MAIN_WEAPON: "attack",
    ItemType.SUB_WEAPON: "attack",
}

# Destruction chance by target level
DESTRUCTION_RATES: Final[dict[int, float]] = {
    18: 0.02,
    19: 0.03,
    20: 0.05,
    21: 0.07,
    22: 0.10,
    23: 0.13,
    24: 0.16,
    25: 0.20,
}

# Destruction prevention is offered from this current level
DESTRUCTION_PREVENTION_MIN_LEVEL: Final[int] = 20

# Prevention cost by current level; levels past the table use the last entry
DESTRUCTION_PREVENTION_COSTS: Final[dict[int, int]] = {
    20: 500_000,
    21: 650_000,
    22: 800_000,
    23: 1_000_000,
    24: 1_250_000,
    25: 1_500_000,
}

# =============================================================================
# SALES
# =============================================================================
ITEM_BASE_SALE_PRICES: Final[dict[ItemGrade, int]] = {
    ItemGrade.COMMON: 5,
    ItemGrade.RARE: 12,
    ItemGrade.EPIC: 25,
    ItemGrade.LEGENDARY: 50,
    ItemGrade.MYTHIC: 100,
}

# Sale bonus per enhancement level, as a share of the base price
ENHANCEMENT_SALE_BONUS: Final[float] = 0.05

# =============================================================================
# GACHA
# =============================================================================
GACHA_COSTS: Final[dict[str, int]] = {
    "armor": 800,
    "accessories": 1200,
    "weapons": 1600,
}

GACHA_CATEGORIES: Final[dict[str, list[ItemType]]] = {
    "armor": [
        ItemType.HELMET,
        ItemType.ARMOR,
        ItemType.PANTS,
        ItemType.GLOVES,
        ItemType.SHOES,
        ItemType.SHOULDER,
    ],
    "accessories": [ItemType.EARRING, ItemType.RING, ItemType.NECKLACE],
    "weapons": [ItemType.MAIN_WEAPON, ItemType.SUB_WEAPON],
}

# [common, rare, epic, legendary, mythic]
GACHA_GRADE_RATES: Final[list[float]] = [0.79, 0.18, 0.025, 0.0045, 0.0005]

# =============================================================================
# SYNTHESIS
# =============================================================================
SYNTHESIS_REQUIRED_COUNT: Final[int] = 10  # Items of one grade consumed per synthesis
SYNTHESIS_STAGE: Final[int] = 1  # Stat growth applied to synthesized items

# =============================================================================
# PROGRESSION
# =============================================================================
BASE_CREDIT_RATE: Final[float] = 1.0  # Credits per second at multiplier 1.0

# =============================================================================
# BOSSES & THEMES
# =============================================================================
BOSS_NAMES: Final[list[str]] = [
    # 1-10: Forest
    "Slime King", "Goblin Chieftain", "Orc Warlord", "Alpha Wolf", "Giant Spider",
    "Troll King", "Elder Ent", "Bear Lord", "Wyvern", "Forest Guardian",
    # 11-20: Caves
    "Cave Bat King", "Petrified Golem", "Underground Dragon", "Crystal Spider", "Dark Troll",
    "Lava Slime", "Minotaur", "Gargoyle Lord", "Underground King", "Ruler of the Caves",
    # 21-30: Desert
    "Desert Scorpion", "Mummy Pharaoh", "Desert Dragon", "Sand Golem", "Oasis Guardian",
    "Sphinx", "Desert Naga", "Cactus Fiend", "Master of the Sandstorm", "Avatar of the Sun",
    # 31-40: Sea
    "Kraken", "Abyssal Merman", "Leviathan", "Sea Serpent", "Ghost Pirate Ship",
    "Herald of Poseidon", "Giant Shark", "Sea Witch", "Neptune Guardian", "Tyrant of the Sea",
    # 41-50: Volcano
    "Fire Elemental", "Lava Golem", "Balrog", "Flame Dragon", "Magma Slime",
    "Volcano Demon", "Phoenix", "Lord of Flames", "Lava Titan", "Volcano God",
    # 51-60: Ice kingdom
    "Ice Golem", "Frost Giant", "Ice Dragon", "Blizzard Wolf", "Glacier Giant",
    "Ice Witch", "Crystal Beast", "Polar Bear King", "Ice Titan", "Queen of Frost",
    # 61-70: Sky
    "Griffon", "Pegasus", "Angel Warrior", "Sky Dragon", "Cloud Giant",
    "Thunderbird", "Wind Spirit", "Sky Fortress Guardian", "Celestial Knight", "King of the Sky",
    # 71-80: Underworld
    "Skeleton King", "Lich", "Death Knight", "Zombie Lord", "Banshee",
    "Necromancer", "Undead Dragon", "Grim Reaper", "Herald of Hell", "Lord of Death",
    # 81-90: Ancient temple
    "Ancient Golem", "Temple Guardian", "Pharaoh's Curse", "Anubis", "Avatar of Horus",
    "Mummy Lord", "Ancient Sphinx", "Keeper of the Temple", "Pharaoh King", "Apostle of the Old Gods",
    # 91-100: Final bosses
    "Ancient Dragon", "Demon Lord", "Fallen Angel", "Lord of Chaos", "Herald of Ruin",
    "King of Despair", "Knight of the End", "Shadow of the Creator", "Destroyer of Worlds", "The Absolute",
]

# One theme per band of ten stages: (theme, description, color)
STAGE_THEMES: Final[list[tuple[str, str, str]]] = [
    ("Forest Monsters", "A first adventure against the creatures of a peaceful forest", "green"),
    ("Cave Beasts", "Dangerous monsters hiding in the dark", "gray"),
    ("Desert Perils", "Ancient guardians of the scorching desert", "yellow"),
    ("Sea Monsters", "Legendary creatures risen from the deep", "blue"),
    ("Volcano Demons", "Fire spirits emerging from a burning volcano", "red"),
    ("Ice Kingdom", "Guardians of a kingdom of eternal winter", "cyan"),
    ("Sky Guardians", "Celestial warriors descended from above the clouds", "sky"),
    ("Underworld", "An undead legion risen from the land of death", "purple"),
    ("Ancient Temple", "Ancient guardians of a forgotten civilization's temple", "amber"),
    ("Final Bosses", "The last battle to decide the fate of the world", "black"),
]
STAGES_PER_THEME: Final[int] = 10
