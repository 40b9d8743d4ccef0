"""Pure view derivations over canonical enrollments.

Everything here is a function of its arguments; the controller calls these
on every read so projections always follow the latest snapshot.
"""
import math
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from enrollment_admin.models.enrollment import Enrollment, EnrollmentFilters, EnrollmentStats

ALL = "all"


class Page(BaseModel):
    items: List[Enrollment] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 1


def _contains(value: Any, needle: str) -> bool:
    if not isinstance(value, str):
        return False
    return needle in value.lower()


def matches_search(record, search: str) -> bool:
    needle = (search or "").lower()
    if not needle:
        return True
    return (
        _contains(getattr(record, "child_name", None), needle)
        or _contains(getattr(record, "parent_name", None), needle)
        or _contains(getattr(record, "id", None), needle)
    )


def apply_filters(collection: Sequence[Enrollment], filters: EnrollmentFilters) -> List[Enrollment]:
    """
    Search (child name, parent name or id, case-insensitive) AND course id
    AND status. "all" disables the course/status checks. time_range is not
    applied.
    """
    out = []
    for record in collection:
        if not matches_search(record, filters.search):
            continue
        if filters.course != ALL and getattr(record, "course_id", None) != filters.course:
            continue
        if filters.status != ALL and getattr(record, "status", None) != filters.status:
            continue
        out.append(record)
    return out


def select_active(filtered: Sequence[Enrollment], selected_id: Optional[str]) -> Optional[Enrollment]:
    if not filtered:
        return None
    for record in filtered:
        if record.id == selected_id:
            return record
    return filtered[0]


def clamp_page(page_number: int, total_pages: int) -> int:
    return min(max(1, page_number), max(1, total_pages))


def total_pages_for(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def paginate(filtered: Sequence[Enrollment], page_size: int, page_number: int) -> Page:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    total_pages = total_pages_for(len(filtered), page_size)
    page = clamp_page(page_number, total_pages)
    start = (page - 1) * page_size
    return Page(items=list(filtered[start:start + page_size]), page=page, total_pages=total_pages)


def aggregate(filtered: Sequence[Enrollment]) -> EnrollmentStats:
    return EnrollmentStats(
        total=len(filtered),
        pending=sum(1 for r in filtered if r.status == "pending"),
        approved=sum(1 for r in filtered if r.status == "approved"),
        waitlisted=sum(1 for r in filtered if r.status == "waitlisted"),
    )


def overview_cards(stats: EnrollmentStats) -> List[Dict[str, str]]:
    """Dashboard header cards; values are zero-padded to two digits."""
    return [
        {"label": "Total Applications", "value": f"{stats.total:02d}", "helper": "last 30 days"},
        {"label": "Pending Reviews", "value": f"{stats.pending:02d}", "helper": "action needed"},
        {"label": "Approved Students", "value": f"{stats.approved:02d}", "helper": "ready to onboard"},
        {"label": "Waitlist", "value": f"{stats.waitlisted:02d}", "helper": "monitor capacity"},
    ]
