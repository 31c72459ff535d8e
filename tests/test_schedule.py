"""
Tests for schedule expansion and score-kind classification.
"""

import pytest

from wod_runner.core.classify import classify_score_kind, is_weight_category
from wod_runner.core.models import Movement, RestPolicy, WorkoutDefinition
from wod_runner.core.schedule import expand_schedule, round_of


def _workout(
    scheme: str = "FOR_TIME",
    n_moves: int = 3,
    rounds: int = 1,
    category: str | None = None,
) -> WorkoutDefinition:
    movements = tuple(
        Movement(exercise_id=f"ex{i}", target=f"Move {i}", order=i) for i in range(1, n_moves + 1)
    )
    return WorkoutDefinition(
        workout_id="w",
        name="Test",
        scheme=scheme,  # type: ignore[arg-type]
        movements=movements,
        rounds=rounds,
        rest=RestPolicy(),
        category=category,
    )


class TestExpandSchedule:
    """Unrolling rounds × movements."""

    def test_rounds_times_movements(self):
        """3 movements × 4 rounds gives 12 items in round-major order."""
        schedule = expand_schedule(_workout(n_moves=3, rounds=4))
        assert len(schedule) == 12
        assert [item.movement.target for item in schedule[:4]] == [
            "Move 1", "Move 2", "Move 3", "Move 1",
        ]

    def test_round_number_is_index_div_movements_plus_one(self):
        schedule = expand_schedule(_workout(n_moves=3, rounds=4))
        for i, item in enumerate(schedule):
            assert item.round_number == i // 3 + 1
            assert item.order_index == i % 3

    def test_amrap_is_single_round(self):
        """AMRAP ignores rounds; the single round is reused cyclically."""
        schedule = expand_schedule(_workout(scheme="AMRAP", n_moves=3, rounds=5))
        assert len(schedule) == 3
        assert all(item.round_number == 1 for item in schedule)

    def test_movements_sorted_by_order(self):
        movements = (
            Movement(exercise_id="b", target="B", order=2),
            Movement(exercise_id="a", target="A", order=1),
        )
        workout = WorkoutDefinition(workout_id="w", name="W", scheme="FOR_TIME", movements=movements)
        assert [item.movement.target for item in expand_schedule(workout)] == ["A", "B"]

    def test_empty_workout(self):
        assert expand_schedule(_workout(n_moves=0, rounds=3)) == []

    def test_round_of(self):
        schedule = expand_schedule(_workout(n_moves=2, rounds=3))
        assert round_of(schedule, 0) == 1
        assert round_of(schedule, 3) == 2
        assert round_of(schedule, 5) == 3
        assert round_of([], 0) == 1


class TestWorkoutValidation:
    """WorkoutDefinition rejects impossible values."""

    def test_rounds_below_one(self):
        with pytest.raises(ValueError):
            _workout(rounds=0)

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            _workout(scheme="LADDER")

    def test_non_positive_cap(self):
        with pytest.raises(ValueError):
            WorkoutDefinition(workout_id="w", name="W", scheme="AMRAP", time_cap_seconds=0)

    def test_unknown_rest_type(self):
        with pytest.raises(ValueError):
            RestPolicy(rest_type="sometimes")  # type: ignore[arg-type]


class TestClassifyScoreKind:
    """Precedence: AMRAP, then MAX_REPS, then weight, then time."""

    @pytest.mark.parametrize(
        "scheme,category,expected",
        [
            ("FOR_TIME", None, "time"),
            ("EMOM", None, "time"),
            ("AMRAP", None, "rounds"),
            ("AMRAP", "Weight", "rounds"),
            ("MAX_REPS", None, "reps"),
            ("MAX_REPS", "Street Lift", "reps"),
            ("ONE_REP_MAX", None, "weight"),
            ("FOR_TIME", "Street Lift", "weight"),
            ("FOR_TIME", "weight", "weight"),
            ("FOR_TIME", "Cardio", "time"),
        ],
    )
    def test_precedence(self, scheme, category, expected):
        assert classify_score_kind(_workout(scheme=scheme, category=category)) == expected

    def test_weight_category_case_insensitive(self):
        assert is_weight_category("STREET LIFT")
        assert is_weight_category(" Weight ")
        assert not is_weight_category(None)
        assert not is_weight_category("Gymnastics")
