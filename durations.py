import math
import re

DURATION_PATTERN = re.compile(r'PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?')


def format_duration(duration):
    """Format an ISO 8601 duration like 'PT1H2M3S' as '1:02:03'.

    Returns an empty string for empty or unrecognized input.
    """
    if not duration:
        return ""

    match = DURATION_PATTERN.search(duration)
    if not match:
        return ""

    hours, minutes, seconds = (int(part or 0) for part in match.groups())
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_time(seconds):
    """Format a position in seconds as 'M:SS'."""
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    minutes, secs = divmod(int(math.floor(seconds)), 60)
    return f"{minutes}:{secs:02d}"
