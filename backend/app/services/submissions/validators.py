"""
Submission field validation.

Every field is checked independently and reported as a flag so the form can
mark each one. A True flag means the field is missing or invalid.
"""
from typing import Dict

from ...models.ssot import ActivityRequest

DRIVE_HOSTS = ("drive.google.com", "docs.google.com")


def is_valid_drive_link(link: str) -> bool:
    return bool(link) and any(host in link for host in DRIVE_HOSTS)


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def validate_report(title: str, drive_link: str) -> Dict[str, bool]:
    return {
        "title": _blank(title),
        "link": not is_valid_drive_link(drive_link),
    }


def validate_activity_request(request: ActivityRequest) -> Dict[str, bool]:
    date_invalid = request.start_date is None or (
        request.end_date is not None and request.end_date < request.start_date
    )
    return {
        "title": _blank(request.title),
        "date": date_invalid,
        "recurrence_type": _blank(request.recurrence_type),
        "venue": _blank(request.venue),
        "participants": _blank(request.participants),
        "funds": _blank(request.funds),
        "budget": _blank(request.budget),
        "sdg": _blank(request.sdg),
        "likha": _blank(request.likha),
        "design_link": not is_valid_drive_link(request.design_link),
    }


def has_errors(flags: Dict[str, bool]) -> bool:
    return any(flags.values())
