"""
Schedule expansion: a workout definition becomes an ordered list of
(movement, round) work items.

AMRAP workouts are not unrolled: the schedule is the single round, reused
cyclically by the session, and completed rounds are counted instead.
"""

from .models import ScheduleItem, WorkoutDefinition


def expand_schedule(workout: WorkoutDefinition) -> list[ScheduleItem]:
    """
    Expand a workout into its work items.

    Args:
        workout: Workout definition

    Returns:
        rounds × movements items for non-AMRAP schemes, a single round for
        AMRAP. Empty when the workout has no movements.
    """
    movements = workout.ordered_movements
    rounds = 1 if workout.scheme == "AMRAP" else workout.rounds

    return [
        ScheduleItem(movement=movement, round_number=round_number, order_index=idx)
        for round_number in range(1, rounds + 1)
        for idx, movement in enumerate(movements)
    ]


def round_of(schedule: list[ScheduleItem], index: int) -> int:
    """Round number of the item at index, 1 for an empty schedule."""
    if not schedule or index >= len(schedule):
        return 1
    return schedule[index].round_number
