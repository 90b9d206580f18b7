import pytest

from accesssim.core.policy.exceptions import InvalidTimeError
from accesssim.core.timeofday import format_minutes, time_to_minutes


@pytest.mark.parametrize(
    "value, expected",
    [("09:15", 555), ("10:30", 630), ("00:00", 0), ("23:59", 1439), ("9:05", 545)],
)
def test_time_to_minutes(value, expected):
    assert time_to_minutes(value) == expected


@pytest.mark.parametrize("value", ["", "0915", "9:5", "24:00", "12:60", "ab:cd", "09:15:00", None, 915])
def test_time_to_minutes_rejects_malformed_values(value):
    with pytest.raises(InvalidTimeError):
        time_to_minutes(value)


def test_invalid_time_error_is_a_value_error():
    with pytest.raises(ValueError):
        time_to_minutes("noon")


def test_format_minutes_pads_hours_and_minutes():
    assert format_minutes(0) == "00:00"
    assert format_minutes(545) == "09:05"
    assert format_minutes(1439) == "23:59"

    with pytest.raises(InvalidTimeError):
        format_minutes(1440)
