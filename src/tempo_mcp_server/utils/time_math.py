"""Clock and duration helpers for worklog payloads and display."""

SECONDS_PER_HOUR = 3600
MINUTES_PER_DAY = 24 * 60


def calculate_end_time(start_time: str, hours_spent: float) -> str:
    """Calculate the end time of a worklog.

    The result is a plain clock value: durations running past midnight wrap
    around to ``00:MM`` without any date change.

    Args:
        start_time: Start time in HH:MM format (HH:MM:SS is accepted)
        hours_spent: Duration in hours, may be fractional (e.g. 1.25)

    Returns:
        End time in HH:MM format
    """
    hours, minutes = (int(part) for part in start_time.split(":")[:2])
    total_minutes = hours * 60 + minutes + round(hours_spent * 60)
    total_minutes %= MINUTES_PER_DAY
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def hours_to_seconds(hours: float) -> int:
    """Convert hours to whole seconds, rounding to the nearest second."""
    return round(hours * SECONDS_PER_HOUR)


def seconds_to_hours(seconds: int) -> float:
    return seconds / SECONDS_PER_HOUR


def format_hours(seconds: int) -> str:
    """Format a duration in seconds as hours with two decimals."""
    return f"{seconds_to_hours(seconds):.2f}"


def to_api_time(start_time: str) -> str:
    """Convert HH:MM into the HH:MM:SS form expected by Tempo."""
    if start_time.count(":") == 1:
        return f"{start_time}:00"
    return start_time
