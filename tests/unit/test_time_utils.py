from datetime import time

import pytest

from calendar_optimizer.utils.time_utils import (
    format_hhmm,
    minutes_to_time,
    minutes_to_time_str,
    time_to_minutes,
)


class TestTimeToMinutes:
    def test_parses_hours_and_minutes(self):
        assert time_to_minutes("09:30") == 570

    def test_ignores_seconds(self):
        assert time_to_minutes("10:15:45") == 615

    def test_accepts_time_objects(self):
        assert time_to_minutes(time(21, 0)) == 1260

    def test_midnight_is_zero(self):
        assert time_to_minutes("00:00:00") == 0


class TestMinutesToTime:
    def test_zero_padded_with_seconds(self):
        assert minutes_to_time_str(545) == "09:05:00"

    def test_without_seconds(self):
        assert minutes_to_time_str(545, include_seconds=False) == "09:05"

    def test_inverse_of_time_to_minutes(self):
        assert time_to_minutes(minutes_to_time_str(1439)) == 1439

    def test_time_object(self):
        assert minutes_to_time(660) == time(11, 0)

    def test_time_object_rejects_end_of_day(self):
        with pytest.raises(ValueError):
            minutes_to_time(1440)

    def test_format_hhmm(self):
        assert format_hhmm(time(7, 5, 30)) == "07:05"
        assert format_hhmm("18:45:00") == "18:45"
