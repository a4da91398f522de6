"""
Tests for the pure scoring heuristics.
"""

from datetime import date, time, timedelta

import pytest

from calendar_optimizer.models.optimization_suggestion import SuggestionType
from calendar_optimizer.services.scoring import (
    calculate_benefit_score,
    calculate_new_block_size,
    calculate_preference_score,
    classify_suggestion_type,
)

SUNDAY = date(2025, 6, 1)
MONDAY = date(2025, 6, 2)


def _weeks_back(day: date, count: int):
    return [day - timedelta(weeks=i) for i in range(count)]


class TestPreferenceScore:
    def test_no_history_is_neutral(self):
        assert calculate_preference_score([], 6, time(10, 0)) == 50

    def test_habitual_day_and_time(self):
        history = [(d, time(10, 0)) for d in _weeks_back(SUNDAY, 5)]

        assert calculate_preference_score(history, SUNDAY.weekday(), time(10, 0)) == 90

    def test_never_booked_day_and_far_time(self):
        history = [(d, time(18, 0)) for d in _weeks_back(MONDAY, 5)]

        assert calculate_preference_score(history, SUNDAY.weekday(), time(10, 0)) == 40

    def test_day_bonus_requires_more_than_thirty_percent(self):
        # 3 of 10 on Sunday is exactly 30%, which does not count as a habit
        history = [(d, time(18, 0)) for d in _weeks_back(SUNDAY, 3)]
        history += [(d, time(18, 0)) for d in _weeks_back(MONDAY, 7)]

        assert calculate_preference_score(history, SUNDAY.weekday(), time(10, 0)) == 50

        history.append((SUNDAY - timedelta(weeks=10), time(18, 0)))
        assert calculate_preference_score(history, SUNDAY.weekday(), time(10, 0)) == 70

    def test_time_window_is_inclusive_of_sixty_minutes(self):
        history = [(d, time(11, 0)) for d in _weeks_back(MONDAY, 4)]

        # Monday never matches Sunday: -10, but 11:00 is within an hour of 10:00: +20
        assert calculate_preference_score(history, SUNDAY.weekday(), time(10, 0)) == 60
        assert calculate_preference_score(history, SUNDAY.weekday(), time(9, 59)) == 40

    def test_accepts_string_times(self):
        history = [(SUNDAY, "10:00:00"), (SUNDAY - timedelta(weeks=1), "10:30")]

        assert calculate_preference_score(history, SUNDAY.weekday(), "10:00") == 90

    def test_always_within_bounds(self):
        for size in (1, 2, 7, 20):
            for day_of_week in range(7):
                history = [(MONDAY - timedelta(days=i), time(6 + i % 12, 0)) for i in range(size)]
                score = calculate_preference_score(history, day_of_week, time(12, 0))
                assert 0 <= score <= 100


class TestBenefitScore:
    def test_formula(self):
        # min(40, 60/2) + min(20, 2*5) + 50% of 30
        assert calculate_benefit_score(60, 2, 50) == 55

    def test_caps(self):
        assert calculate_benefit_score(500, 50, 100) == 90

    def test_clamped_to_range(self):
        assert calculate_benefit_score(0, 0, 0) == 0
        assert calculate_benefit_score(500, 50, 500) == 100
        assert calculate_benefit_score(0, 0, -500) == 0

    def test_halves_round_up(self):
        assert calculate_benefit_score(45, 2, 50) == 48

    @pytest.mark.parametrize("argument", [0, 1, 2])
    def test_monotonic_in_each_input(self, argument):
        base = [30, 2, 50]
        previous = None
        for value in range(0, 101, 5):
            args = list(base)
            args[argument] = value
            score = calculate_benefit_score(*args)
            assert 0 <= score <= 100
            if previous is not None:
                assert score >= previous
            previous = score


class TestNewBlockSize:
    def test_measured_to_next_booking(self):
        assert calculate_new_block_size(time(11, 0), time(13, 0), "21:00") == 120

    def test_measured_to_end_of_day_when_last(self):
        assert calculate_new_block_size(time(11, 0), None, "21:00") == 600

    def test_never_negative(self):
        assert calculate_new_block_size(time(21, 30), None, "21:00") == 0

    def test_classification_threshold(self):
        assert classify_suggestion_type(59) == SuggestionType.CONSOLIDATE_GAP
        assert classify_suggestion_type(60) == SuggestionType.CREATE_BLOCK
