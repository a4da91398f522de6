# calendar_optimizer/services/scoring.py
"""
Scoring heuristics for calendar optimization.

Pure functions, no data access:
- preference score: how well a candidate day/time matches a client's history
- benefit score: overall value of a proposed move (0-100)
- new block size and suggestion type classification
"""

from datetime import date
import math
from typing import Optional, Sequence, Tuple

from ..models.optimization_suggestion import SuggestionType
from ..utils.time_utils import TimeLike, time_to_minutes

NEUTRAL_PREFERENCE_SCORE = 50

# Share of history that must match before a day/time counts as habitual
HABIT_THRESHOLD = 0.3
HABIT_BONUS = 20
SIMILAR_TIME_WINDOW_MINUTES = 60
UNUSED_DAY_PENALTY = 10

GAP_POINTS_CAP = 40
DENSITY_POINTS_PER_BOOKING = 5
DENSITY_POINTS_CAP = 20
PREFERENCE_POINTS_CAP = 30

BLOCK_THRESHOLD_MINUTES = 60


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return min(high, max(low, value))


def calculate_preference_score(
    history: Sequence[Tuple[date, TimeLike]],
    day_of_week: int,
    start_time: TimeLike,
) -> int:
    """
    Score a candidate slot against a client's booking history.

    Args:
        history: (booking_date, start_time) pairs of past sessions
        day_of_week: Candidate weekday, Monday=0 .. Sunday=6
        start_time: Candidate start time

    Returns:
        50 with no history, otherwise 50 adjusted by:
        +20 if more than 30% of sessions fell on that weekday,
        +20 if more than 30% started within 60 minutes of the candidate,
        -10 if the client never booked that weekday. Clamped to 0-100.
    """
    total = len(history)
    if total == 0:
        return NEUTRAL_PREFERENCE_SCORE

    score = NEUTRAL_PREFERENCE_SCORE

    same_day = sum(1 for booking_date, _ in history if booking_date.weekday() == day_of_week)
    if same_day > total * HABIT_THRESHOLD:
        score += HABIT_BONUS

    candidate_minutes = time_to_minutes(start_time)
    similar_time = sum(
        1
        for _, booked_start in history
        if abs(time_to_minutes(booked_start) - candidate_minutes) <= SIMILAR_TIME_WINDOW_MINUTES
    )
    if similar_time > total * HABIT_THRESHOLD:
        score += HABIT_BONUS

    if same_day == 0:
        score -= UNUSED_DAY_PENALTY

    return int(_clamp(score))


def calculate_benefit_score(gap_minutes: float, booking_count: int, preference_score: float) -> int:
    """
    Rank an opportunity from 0 to 100.

    Gap size contributes up to 40 points (half a point per minute), day density
    up to 20 (5 per booking), and client preference up to 30. Halves round up.
    """
    score = min(GAP_POINTS_CAP, gap_minutes / 2)
    score += min(DENSITY_POINTS_CAP, booking_count * DENSITY_POINTS_PER_BOOKING)
    score += preference_score * PREFERENCE_POINTS_CAP / 100
    return int(math.floor(_clamp(score) + 0.5))


def calculate_new_block_size(
    proposed_end: TimeLike,
    next_start: Optional[TimeLike],
    day_end: TimeLike,
) -> int:
    """
    Free minutes after the moved booking's new end.

    Measured to the next booking of the day, or to ``day_end`` when the moved
    booking was the last one. Never negative.
    """
    end_minutes = time_to_minutes(proposed_end)
    boundary = time_to_minutes(next_start if next_start is not None else day_end)
    return max(0, boundary - end_minutes)


def classify_suggestion_type(new_block_size: int) -> SuggestionType:
    if new_block_size >= BLOCK_THRESHOLD_MINUTES:
        return SuggestionType.CREATE_BLOCK
    return SuggestionType.CONSOLIDATE_GAP
