"""Presentation helpers for the report listing."""

from __future__ import annotations

import math
import re
from datetime import datetime

from urbanmon.views.models import IssuePresentation, ReportLocation, StatusBadge

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_SECONDS_PER_DAY = 24 * 60 * 60

# normalized issue key → (type label, icon, icon background, icon color)
_ISSUE_TYPES: dict[str, tuple[str, str, str, str]] = {
    "airpollution": ("Air Pollution", "ri-bubble-chart-line", "bg-orange-100", "text-orange-600"),
    "trafficcongestion": ("Traffic Congestion", "ri-traffic-line", "bg-red-100", "text-red-600"),
    "flooding": ("Flooding", "ri-flood-line", "bg-blue-100", "text-blue-600"),
    "noisepollution": ("Noise Pollution", "ri-volume-up-line", "bg-purple-100", "text-purple-600"),
    "waterpollution": ("Water Pollution", "ri-drop-line", "bg-cyan-100", "text-cyan-600"),
    "garbagedisposal": ("Garbage Disposal", "ri-delete-bin-line", "bg-green-100", "text-green-600"),
}
_OTHER_ISSUE = ("Other", "ri-error-warning-line", "bg-gray-100", "text-gray-600")

_STATUSES: dict[str, tuple[str, str]] = {
    "pending": ("Pending", "bg-yellow-100 text-yellow-800"),
    "in_progress": ("In Progress", "bg-yellow-100 text-yellow-800"),
    "inProgress": ("In Progress", "bg-orange-100 text-orange-800"),
    "resolved": ("Resolved", "bg-green-100 text-green-800"),
    "urgent": ("Urgent", "bg-red-100 text-red-800"),
    "open": ("Open", "bg-red-100 text-red-800"),
    "closed": ("Closed", "bg-gray-100 text-gray-800"),
}
_UNKNOWN_STATUS = ("Unknown", "bg-gray-100 text-gray-800")

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _issue_key(issue_type: str) -> str:
    return re.sub(r"[\s_\-]", "", issue_type).lower()


def issue_title(issue_type: str) -> str:
    """``"airPollution"`` → ``"Air Pollution"``; ``"pothole"`` → ``"Pothole"``."""
    spaced = _CAMEL_BOUNDARY.sub(" ", issue_type.replace("_", " ")).strip()
    return spaced[:1].upper() + spaced[1:]


def format_issue(issue_type: str) -> IssuePresentation:
    label, icon, icon_bg, icon_color = _ISSUE_TYPES.get(_issue_key(issue_type), _OTHER_ISSUE)
    return IssuePresentation(
        title=issue_title(issue_type),
        type=label,
        icon=icon,
        icon_bg=icon_bg,
        icon_color=icon_color,
    )


def split_location(location: str) -> ReportLocation:
    """Text before the first comma is the area, the remainder the details."""
    area, _, details = location.partition(",")
    return ReportLocation(area=area, details=details.strip())


def format_status(status: str) -> StatusBadge:
    label, color = _STATUSES.get(status, _UNKNOWN_STATUS)
    return StatusBadge(label=label, color=color)


def format_clock_time(moment: datetime) -> str:
    """``3:05 PM`` style, independent of the process locale."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {meridiem}"


def humanize_date(moment: datetime, now: datetime) -> str:
    """``Today, 3:05 PM`` / ``Yesterday, ...`` / ``Apr 15, ...``.

    Days are counted as whole 24-hour periods elapsed, rendered in the
    timezone of *now*.
    """
    local = moment.astimezone(now.tzinfo) if now.tzinfo is not None else moment
    elapsed_days = math.floor((now - moment).total_seconds() / _SECONDS_PER_DAY)
    clock = format_clock_time(local)
    if elapsed_days == 0:
        return f"Today, {clock}"
    if elapsed_days == 1:
        return f"Yesterday, {clock}"
    return f"{_MONTHS[local.month - 1]} {local.day}, {clock}"
