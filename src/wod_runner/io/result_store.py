"""
JSONL-based storage for workout results.

This is the default persistence collaborator for submitted sessions: one
JSON object per line, appended in submission order.
"""

import json
from pathlib import Path

from ..core.engine.config_loader import app_home
from ..core.models import ResultRecord
from .serializers import ValidationError, dict_to_result, result_to_json_line


class ResultStore:
    """Manages submitted results stored in JSONL format."""

    def __init__(self, results_path: str | Path):
        """
        Initialize the result store.

        Args:
            results_path: Path to the JSONL results file
        """
        self.results_path = Path(results_path)

    def exists(self) -> bool:
        """Check if the results file exists."""
        return self.results_path.exists()

    def append_result(self, record: ResultRecord) -> None:
        """
        Append a result, creating the file and parent directories if needed.

        Raises:
            OSError: If the file cannot be written
        """
        self.results_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.results_path, "a", encoding="utf-8") as f:
            f.write(result_to_json_line(record) + "\n")

    def load_results(self, workout_id: str | None = None, limit: int | None = None) -> list[ResultRecord]:
        """
        Load results, newest first.

        Args:
            workout_id: Only return results for this workout
            limit: Maximum number of results

        Returns:
            List of ResultRecord, empty if the file does not exist

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.results_path.exists():
            return []

        results: list[ResultRecord] = []
        with open(self.results_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = dict_to_result(json.loads(line))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.results_path}: {e}"
                    ) from e
                if workout_id is None or record.workout_id == workout_id:
                    results.append(record)

        results.sort(key=lambda r: r.timestamp, reverse=True)
        if limit is not None:
            results = results[:limit]
        return results


def get_default_results_path() -> Path:
    """Return ~/.wod-runner/results.jsonl."""
    return app_home() / "results.jsonl"
