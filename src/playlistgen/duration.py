"""Video duration parsing and the duration admission rule."""

import re
from typing import Optional

from . import config

_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def parse_duration(duration: Optional[str]) -> int:
    """Convert an ISO-8601 duration such as ``PT1H2M3S`` into seconds.

    Returns 0 for anything that does not match.
    """
    if not duration:
        return 0
    match = _DURATION_RE.match(duration)
    if not match:
        return 0
    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def is_admissible(seconds: int) -> bool:
    """Whether a video of this length may go into a generated playlist."""
    return config.MIN_DURATION_SECONDS < seconds <= config.MAX_DURATION_SECONDS
