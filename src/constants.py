"""Contains global constants and default values used throughout the project."""

from enums import ExampleRuleSet


# === MODEL CONSTANTS ===

GRID_WIDTH_DEFAULT: int = 30
GRID_HEIGHT_DEFAULT: int = 30

# Packed 0xRRGGBB tile values (red, green, blue), which double as their display colors.
PALETTE_DEFAULT: tuple[int, ...] = (0xFF0000, 0x00FF00, 0x0000FF)

EXAMPLE_RULE_SET_DEFAULT: ExampleRuleSet = ExampleRuleSet.NO_RED_NEXT_TO_BLUE

# Marker for cells without a resolved tile value in exported tile grids.
UNRESOLVED_TILE_VALUE: int = -1

# Upper bound on the number of undone collapses per run. None searches exhaustively.
WFC_MAX_BACKTRACKS_DEFAULT: int | None = 10000

RANDOM_SEED_MAX: int = 999999999

# Reserved display color of cells whose candidate set became empty.
CONTRADICTION_COLOR_RGB: tuple[int, int, int] = (255, 0, 255)

# === VIEW CONSTANTS ===

WINDOW_WIDTH: int = 800
WINDOW_HEIGHT: int = 600

TICK_INTERVAL_MS: int = 1000 // 60

LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
LOG_DATE_FORMAT: str = "%H:%M:%S"
