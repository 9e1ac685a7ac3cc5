"""All tunable constants for the island survival simulation.

Every magic number in the codebase must reference this file.
"""

# =============================================================================
# WORLD
# =============================================================================
WORLD_CENTER: tuple[float, float] = (0.0, 0.0)
ISLAND_RADIUS: float = 50.0
SAND_RADIUS: float = 55.0
SWIM_THRESHOLD: float = 52.0          # beyond this distance the player swims
WATER_MOVEMENT_LIMIT: float = 85.0    # outer bound of traversable water
SWIM_VERTICAL_OFFSET: float = -0.4

# =============================================================================
# TIME
# =============================================================================
TICK_INTERVAL_MS: int = 100
REFERENCE_TICK_MS: float = 100.0      # per-tick chances are expressed against this
MAX_TICK_DELTA_S: float = 0.2         # clamp for stalls / backgrounding
RESOURCE_SWEEP_INTERVAL_MS: int = 2000
DAY_LENGTH_MS: float = 120_000.0      # 2 minutes per day
START_TIME_OF_DAY: float = 8.0
NIGHT_START_HOUR: float = 19.0
NIGHT_END_HOUR: float = 6.0

# =============================================================================
# PLAYER
# =============================================================================
MAX_ENERGY: float = 100.0
HEALTH_DECAY_IDLE: float = 0.15       # energy per second
HEALTH_DECAY_MOVING: float = 0.6
HEALTH_DECAY_SWIMMING: float = 1.5
MOVEMENT_SPEED: float = 7.0
MOVEMENT_SPEED_SICK_MULTIPLIER: float = 0.5
ARRIVAL_DISTANCE: float = 0.1
INVENTORY_SIZE: int = 10
WORKBENCH_STORAGE_SIZE: int = 20

# Interaction radii
INTERACTION_DISTANCE: float = 4.0
FISH_INTERACTION_DISTANCE: float = 8.0
TREE_SHAKE_DISTANCE: float = INTERACTION_DISTANCE * 1.5

# =============================================================================
# RESOURCES
# =============================================================================
TOTAL_APPLES: int = 8
TOTAL_FISH: int = 15
ITEM_DESPAWN_TIME_MS: float = 60_000.0
RESPAWN_CHANCE: float = 0.5
RESPAWN_POLICY: str = "fish_only"     # "fish_only" | "all"
APPLE_SPAWN_ANNULUS: tuple[float, float] = (8.0, ISLAND_RADIUS - 2.0)
FISH_SPAWN_ANNULUS: tuple[float, float] = (ISLAND_RADIUS, ISLAND_RADIUS + 30.0)
FISH_DEPTH: float = -0.2
SEED_DROP_OFFSET: float = 0.5

# =============================================================================
# TREES
# =============================================================================
INITIAL_TREE_COUNT: int = 15
TREE_PLACEMENT_MIN_RADIUS: float = 5.0
TREE_CLEARING_RADIUS: float = 8.0     # no trees around the workbench
TREE_INITIAL_SCALE: tuple[float, float] = (0.8, 1.5)
TREE_DROP_CHANCE: float = 0.5         # base chance, scales with tree size
TREE_DECAY_FACTOR: float = 0.8        # divisor growth per outstanding shake
TREE_RECOVERY_TIME_MS: float = 10_000.0
TREE_DROP_SCATTER: float = 1.0        # +/- offset of shaken drops
MAX_TREE_SCALE: float = 2.5
TREE_GROWTH_MODE: str = "continuous"  # "continuous" | "stepped"
TREE_PASSIVE_GROWTH_RATE: float = 0.02   # scale per second (continuous)
TREE_GROWTH_STEP_INTERVAL_MS: float = 10_000.0
TREE_GROWTH_STEP_INCREMENT: float = 0.1
TREE_AUTO_DROP_INTERVAL_MS: tuple[float, float] = (30_000.0, 90_000.0)
TREE_AUTO_DROP_SCATTER: float = 1.5
SHELTER_DISTANCE: float = 3.5

# =============================================================================
# PLANTING
# =============================================================================
TREE_GROWTH_TIME_MIN_MS: float = 30_000.0
TREE_GROWTH_TIME_MAX_MS: float = 60_000.0
TREE_GROWTH_CHANCE: float = 0.7
SAPLING_SCALE: tuple[float, float] = (0.6, 1.0)

# =============================================================================
# STRUCTURES
# =============================================================================
TORCH_DURATION_MS: float = 60_000.0
TORCHES_PER_CAMPFIRE: int = 3
CAMPFIRE_DURATION_MS: float = 240_000.0
LARGE_CAMPFIRE_DURATION_MS: float = DAY_LENGTH_MS   # lasts all night
CAMPFIRE_LIGHT_RADIUS: float = 25.0
LARGE_CAMPFIRE_LIGHT_RADIUS: float = 45.0
CAMPFIRE_WARMTH_RADIUS: float = INTERACTION_DISTANCE * 1.5
LARGE_CAMPFIRE_WARMTH_RADIUS: float = 12.0
COOKING_DISTANCE: float = INTERACTION_DISTANCE
WORKBENCH_POSITION: tuple[float, float] = WORLD_CENTER
WORKBENCH_SHELTER_RADIUS: float = 6.0

# =============================================================================
# WEATHER
# =============================================================================
MIN_TIME_BETWEEN_RAINS_MS: float = 120_000.0
RAIN_DURATION_MIN_MS: float = 30_000.0
RAIN_DURATION_MAX_MS: float = 60_000.0
RAIN_INTENSITY_RANGE: tuple[float, float] = (0.2, 1.0)
HEAVY_RAIN_THRESHOLD: float = 0.7

# Wetness (0-100), rates per second
MAX_WETNESS: float = 100.0
WETNESS_GAIN_RATE: float = 20.0
WETNESS_DRY_RATE: float = 10.0
SWIM_WETNESS_MULTIPLIER: float = 2.0
RAIN_WETNESS_BASE: float = 0.5        # gain scales with (base + intensity)
FIRE_DRYING_MULTIPLIER: float = 3.0

# =============================================================================
# SICKNESS / FOOD
# =============================================================================
SICKNESS_WETNESS_THRESHOLD: float = 80.0
SICKNESS_CHANCE_FROM_WETNESS: float = 0.02   # per reference tick
HEAVY_RAIN_SICKNESS_MULTIPLIER: float = 2.5
SICKNESS_CHANCE_RAW_FISH: float = 0.30
SICKNESS_CHANCE_MALNUTRITION: float = 0.25
MALNUTRITION_THRESHOLD: int = 4               # same food this many times in a row
SICKNESS_DURATION_MS: float = 30_000.0

APPLE_HEAL_AMOUNT: float = 15.0
FISH_HEAL_AMOUNT: float = 25.0
FISH_COOKED_HEAL_AMOUNT: float = 60.0
APPLE_JUICE_HEAL_AMOUNT: float = 50.0
BIG_FISH_HEAL_AMOUNT: float = 80.0

APPLE_SCORE: int = 10
FISH_SCORE: int = 50
FISH_COOKED_SCORE: int = 100
APPLE_JUICE_SCORE: int = 30
BIG_FISH_SCORE: int = 80

RECIPE_INPUT_COUNT: int = 3

# =============================================================================
# NPC
# =============================================================================
NPC_MAX_ENERGY: float = 100.0
NPC_ENERGY_DECAY: float = 0.1                 # per second, doubled while busy
NPC_BUSY_DECAY_MULTIPLIER: float = 2.0
NPC_SELF_FEED_THRESHOLD: float = 30.0
NPC_WAKE_ENERGY_FRACTION: float = 0.6
NPC_SPAWN_CHANCE_PER_SECOND: float = 0.02
NPC_SPAWN_RING: tuple[float, float] = (ISLAND_RADIUS - 3.0, ISLAND_RADIUS)
NPC_UNCONSCIOUS_DESPAWN_MS: float = 180_000.0
NPC_SPEED: float = 4.0
NPC_WANDER_SPEED_FACTOR: float = 0.5
NPC_WANDER_RADIUS: float = ISLAND_RADIUS * 0.9
NPC_WANDER_CHANCE: float = 0.6
NPC_IDLE_SHORT_WAIT_MS: tuple[float, float] = (1_000.0, 3_000.0)
NPC_IDLE_LONG_WAIT_MS: tuple[float, float] = (4_000.0, 9_000.0)
NPC_ARRIVAL_DISTANCE: float = 0.5
NPC_LOOKAHEAD_DISTANCE: float = 2.0
NPC_PLAYER_PAUSE_RADIUS: float = 3.0
NPC_IGNORE_PLAYER_MS: float = 5_000.0
NPC_ACTION_REFERENCE_S: float = 1.0           # collection chances are per second
NPC_BASE_COLLECT_CHANCE: float = 0.3
NPC_SKILL_GAIN: float = 0.05
NPC_ZONE_MARGIN: float = 2.0
NPC_FISHING_ZONE: tuple[float, float] = (SAND_RADIUS + NPC_ZONE_MARGIN, WATER_MOVEMENT_LIMIT - 5.0)
NPC_BOUNCE_ANGLE: float = 1.0                 # radians of random perturbation
NPC_WOBBLE_CHANCE_PER_SECOND: float = 0.5
NPC_WOBBLE_ANGLE: float = 0.3

NPC_NAMES: list[str] = [
    "Aldric", "Bran", "Cedric", "Darian", "Edwin", "Finn", "Gareth", "Ivor",
    "Jasper", "Kael", "Magnus", "Nolan", "Oswin", "Silas", "Theron", "Wren",
    "Adara", "Brynn", "Celia", "Elara", "Fiona", "Gwen", "Iris", "Kira",
    "Lyra", "Maren", "Nessa", "Petra", "Rhea", "Seren", "Thea", "Yara",
]

# =============================================================================
# LOG
# =============================================================================
LOG_RECENT_LIMIT: int = 5

# =============================================================================
# METRICS / HEADLESS RUNS
# =============================================================================
METRICS_SAMPLE_INTERVAL_MS: float = 1_000.0
AUTOPILOT_EAT_THRESHOLD: float = 60.0
AUTOPILOT_SHAKE_INTERVAL_MS: float = 2_000.0
