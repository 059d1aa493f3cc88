"""
Constants for the timing history preprocessor

All fixed domain values live here so the pipeline stages agree on them.
"""

# Running-order convention. Positions are assigned as POSITION_BASE + sort index.
# Downstream viewers currently expect a 0-based order; switching to 1 changes
# every start_position and lap position at once.
POSITION_BASE = 0

# Start position kept by cars that never completed lap 1
DEFAULT_START_POSITION = 1

# Millisecond units
MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE

# Timing points between the sector lines (Le Mans layout), in track order.
# Each one contributes a "<ID>_time" and "<ID>_elapsed" column to the export.
CHECKPOINT_IDS = (
    "SCL2",
    "Z4",
    "IP1",
    "Z12",
    "SCLC",
    "A7-1",
    "IP2",
    "A8-1",
    "SCLB",
    "PORIN",
    "POROUT",
    "PITREF",
    "SCL1",
    "FORDOUT",
    "FL",
)

# CSV layout
CSV_DELIMITER = ";"
CSV_ENCODING = "utf-8"

REQUIRED_COLUMNS = (
    "NUMBER",
    "DRIVER_NUMBER",
    "DRIVER_NAME",
    "LAP_NUMBER",
    "LAP_TIME",
    "S1",
    "S2",
    "S3",
    "ELAPSED",
    "CLASS",
    "GROUP",
    "TEAM",
    "MANUFACTURER",
)

OPTIONAL_COLUMNS = (
    "LAP_IMPROVEMENT",
    "CROSSING_FINISH_LINE_IN_PIT",
    "S1_IMPROVEMENT",
    "S2_IMPROVEMENT",
    "S3_IMPROVEMENT",
    "KPH",
    "HOUR",
    "TOP_SPEED",
    "PIT_TIME",
)
