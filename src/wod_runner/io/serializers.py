"""
JSON serialization for result records.

Handles conversion between ResultRecord and JSON-compatible dicts.
"""

import json
from typing import Any

from ..core.models import SCALING_TIERS, ResultRecord


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_tier(tier: str) -> str:
    """
    Validate a difficulty tier name.

    Args:
        tier: Tier string (case-insensitive)

    Returns:
        Canonical tier name, e.g. "RX"

    Raises:
        ValidationError: If tier is not a known tier
    """
    for known in SCALING_TIERS:
        if tier.strip().lower() == known.lower():
            return known
    raise ValidationError(f"Invalid tier: {tier}. Must be one of {SCALING_TIERS}")


def result_to_dict(record: ResultRecord) -> dict[str, Any]:
    """
    Convert ResultRecord to JSON-compatible dict.

    Args:
        record: ResultRecord to convert

    Returns:
        Dict representation
    """
    return {
        "id": record.log_id,
        "user_id": record.user_id,
        "workout_id": record.workout_id,
        "workout_name": record.workout_name,
        "timestamp": record.timestamp,
        "location": record.location,
        "total_time_seconds": record.total_time_seconds,
        "score_display": record.score_display,
        "notes": record.notes,
        "difficulty_tier": record.difficulty_tier,
        "verification_status": record.verification_status,
        "witness_id": record.witness_id,
    }


def dict_to_result(data: dict[str, Any]) -> ResultRecord:
    """
    Convert dict to ResultRecord.

    Args:
        data: Dict representation

    Returns:
        ResultRecord instance

    Raises:
        ValidationError: If required keys are missing or values are invalid
    """
    try:
        return ResultRecord(
            log_id=str(data["id"]),
            user_id=str(data["user_id"]),
            workout_id=str(data["workout_id"]),
            workout_name=str(data.get("workout_name", "Custom")),
            timestamp=int(data["timestamp"]),
            location=str(data.get("location", "Unknown")),
            total_time_seconds=data["total_time_seconds"],
            score_display=str(data["score_display"]),
            notes=str(data.get("notes", "")),
            difficulty_tier=data.get("difficulty_tier", "RX"),
            verification_status=data.get("verification_status", "unverified"),
            witness_id=data.get("witness_id"),
        )
    except KeyError as e:
        raise ValidationError(f"Missing field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


def result_to_json_line(record: ResultRecord) -> str:
    """Serialize a record as one compact JSONL line (no trailing newline)."""
    return json.dumps(result_to_dict(record), ensure_ascii=True, separators=(",", ":"))
