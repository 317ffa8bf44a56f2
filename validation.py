"""
Structural checks for incoming animal JSON.

Checks run in a fixed order and stop at the first failure, so the same input
always reports the same message.
"""

import re
from typing import Any, Optional, Tuple

REQUIRED_FIELDS = ("name", "sciName", "description", "images", "events")

DATE_RE = re.compile(r"(0[1-9]|1[0-2])/(0[1-9]|[12][0-9]|3[01])/[0-9]{4}")


def _non_blank(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) >= 1


def _has_min_items(value: Any, minimum: int) -> bool:
    return isinstance(value, list) and len(value) >= minimum


def _validate_event(event: Any) -> Optional[str]:
    if not isinstance(event, dict) or not _non_blank(event.get("name")):
        return "invalid event: must contain a name"
    date = event.get("date")
    if not isinstance(date, str) or not DATE_RE.fullmatch(date):
        return "invalid event: must contain a date in the format mm/dd/yyyy"
    if not _non_blank(event.get("url")):
        return "invalid event: must contain a url"
    return None


def validate_animal(candidate: Any) -> Tuple[bool, Optional[str]]:
    """Check a parsed JSON value against the animal schema.

    Returns (True, None) when accepted, otherwise (False, message) naming the
    first violation found.
    """
    fields = candidate if isinstance(candidate, dict) else {}
    for field in REQUIRED_FIELDS:
        if field not in fields:
            return False, f"invalid {field}: must exist"

    if not _non_blank(fields["name"]):
        return False, "invalid name: must have a length of at least 1"
    if not _non_blank(fields["sciName"]):
        return False, "invalid sciName: must have a length of at least 1"
    if not _has_min_items(fields["description"], 2):
        return False, "invalid description: must contain at least 2 items"
    if not _has_min_items(fields["images"], 1):
        return False, "invalid images: must not be empty"
    if not _has_min_items(fields["events"], 1):
        return False, "invalid events: must not be empty"

    for event in fields["events"]:
        error = _validate_event(event)
        if error:
            return False, error

    return True, None
