"""Daily prompt time parsing.

Guild settings store the post time as ``HH:MM:00`` so the scheduler can
compare it with the current minute as plain text.
"""

from __future__ import annotations

import re

_PROMPT_TIME = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])(?::00)?$")


def normalize_prompt_time(value: str) -> str:
    """Turn a 24h ``H:MM``/``HH:MM`` time into the stored ``HH:MM:00`` form.

    Raises:
        ValueError: The value is not a valid 24 hour time.
    """
    match = _PROMPT_TIME.match(value.strip())
    if match is None:
        raise ValueError("Invalid time format. Use HH:MM in 24-hour format (e.g. 09:00 or 18:30)")
    hour, minute = match.groups()
    return f"{int(hour):02d}:{minute}:00"
