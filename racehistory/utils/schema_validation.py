"""
JSON Schema validation for the preprocessed race document.

Catches shaping mistakes before a malformed document reaches the viewers.
"""

import logging
from typing import Any, Dict

from jsonschema import ValidationError, validate

logger = logging.getLogger(__name__)


class OutputValidationError(ValueError):
    """Output document does not match RACE_DOCUMENT_SCHEMA."""


_DURATION_TEXT = {"type": "string", "pattern": r"^(\d+:)?(\d+:)?\d+\.\d{3}$"}
_OPTIONAL_DURATION_TEXT = {"type": "string", "pattern": r"^((\d+:)?(\d+:)?\d+\.\d{3})?$"}

_MINI_SECTORS = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "required": ["time", "elapsed"],
        "properties": {
            "time": {"type": "string"},
            "elapsed": {"type": "string"},
            "best": {"type": "string"},
        },
    },
}

# ============================================================================
# RAW LAP (one per CSV row)
# ============================================================================
RAW_LAP_SCHEMA = {
    "type": "object",
    "required": [
        "carNumber",
        "driverNumber",
        "lapNumber",
        "lapTime",
        "elapsed",
        "driverName",
        "class",
        "team",
    ],
    "properties": {
        "carNumber": {"type": "string"},
        "driverNumber": {"type": "integer", "minimum": 0},
        "lapNumber": {"type": "integer"},
        "lapTime": _DURATION_TEXT,
        "lapImprovement": {"type": "integer"},
        "crossingFinishLineInPit": {"type": "string"},
        "s1": _OPTIONAL_DURATION_TEXT,
        "s2": _OPTIONAL_DURATION_TEXT,
        "s3": _OPTIONAL_DURATION_TEXT,
        "kph": {"type": "number"},
        "elapsed": _DURATION_TEXT,
        "hour": {"type": "string"},
        "topSpeed": {"type": "string"},
        "driverName": {"type": "string"},
        "pitTime": _OPTIONAL_DURATION_TEXT,
        "class": {"type": "string"},
        "group": {"type": "string"},
        "team": {"type": "string"},
        "manufacturer": {"type": "string"},
        "miniSectors": _MINI_SECTORS,
    },
}

# ============================================================================
# PREPROCESSED CAR
# ============================================================================
PREPROCESSED_LAP_SCHEMA = {
    "type": "object",
    "required": ["carNumber", "driver", "lap", "position", "time", "best", "elapsed"],
    "properties": {
        "carNumber": {"type": "string"},
        "driver": {"type": "string"},
        "lap": {"type": "integer"},
        "position": {"type": ["integer", "null"], "minimum": 0},
        "time": _DURATION_TEXT,
        "best": _DURATION_TEXT,
        "sector_1": _DURATION_TEXT,
        "sector_2": _DURATION_TEXT,
        "sector_3": _DURATION_TEXT,
        "s1_best": _DURATION_TEXT,
        "s2_best": _DURATION_TEXT,
        "s3_best": _DURATION_TEXT,
        "elapsed": _DURATION_TEXT,
        "miniSectors": _MINI_SECTORS,
    },
}

PREPROCESSED_CAR_SCHEMA = {
    "type": "object",
    "required": ["carNumber", "drivers", "class", "startPosition", "laps"],
    "properties": {
        "carNumber": {"type": "string"},
        "drivers": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "isCurrentDriver"],
                "properties": {
                    "name": {"type": "string"},
                    "isCurrentDriver": {"type": "boolean"},
                },
            },
        },
        "class": {"type": "string"},
        "group": {"type": "string"},
        "team": {"type": "string"},
        "manufacturer": {"type": "string"},
        "startPosition": {"type": "integer"},
        "laps": {"type": "array", "items": PREPROCESSED_LAP_SCHEMA},
    },
}

# ============================================================================
# TIMELINE EVENT
# ============================================================================
TIMELINE_EVENT_SCHEMA = {
    "type": "object",
    "required": ["event_time", "event_type"],
    "properties": {
        "event_time": _DURATION_TEXT,
        "event_type": {
            "oneOf": [
                {"const": "RaceStart"},
                {
                    "type": "object",
                    "required": ["CarEvent"],
                    "properties": {
                        "CarEvent": {
                            "type": "array",
                            "minItems": 2,
                            "maxItems": 2,
                            "prefixItems": [
                                {"type": "string"},
                                {
                                    "oneOf": [
                                        {"enum": ["Retirement", "Checkered"]},
                                        {
                                            "type": "object",
                                            "required": ["LapCompleted"],
                                            "properties": {
                                                "LapCompleted": {"type": "integer"}
                                            },
                                        },
                                    ]
                                },
                            ],
                        }
                    },
                },
            ]
        },
    },
}

RACE_DOCUMENT_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name", "laps", "preprocessed", "timeline_events"],
    "properties": {
        "name": {"type": "string"},
        "laps": {"type": "array", "items": RAW_LAP_SCHEMA},
        "preprocessed": {"type": "array", "items": PREPROCESSED_CAR_SCHEMA},
        "timeline_events": {"type": "array", "items": TIMELINE_EVENT_SCHEMA},
    },
}


def validate_json(data: Dict[str, Any], schema: Dict[str, Any], name: str) -> None:
    """
    Validate JSON data against schema using jsonschema library.

    Raises OutputValidationError if validation fails.
    """
    try:
        validate(instance=data, schema=schema)
        logger.debug(f"{name} validated successfully")
    except ValidationError as e:
        error_msg = f"Invalid {name}: {e.message} at {list(e.absolute_path)}"
        logger.error(f"{name} validation failed: {error_msg}")
        raise OutputValidationError(error_msg) from e


def validate_race_document(data: Dict[str, Any], name: str = "race document") -> None:
    """Validate a preprocessed race document."""
    validate_json(data, RACE_DOCUMENT_SCHEMA, name)
