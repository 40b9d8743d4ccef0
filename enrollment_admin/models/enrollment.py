"""Pydantic models for enrollment applications stored in the Realtime Database.

Attributes are snake_case; API payloads and the wire use the camelCase aliases.
"""
from datetime import datetime, timezone
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EnrollmentStatus = Literal["pending", "approved", "waitlisted"]
ENROLLMENT_STATUSES = ("pending", "approved", "waitlisted")

TimeRange = Literal["7d", "30d", "90d"]


class Enrollment(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str

    # Child
    child_name: str = ""
    child_age: str = ""
    child_gender: str = ""

    # Parent / guardian
    parent_name: str = ""
    parent_email: str = ""
    parent_phone: str = ""
    parent_relation: str = ""

    # Course choice
    course: str = ""
    course_id: str = ""
    preferred_time: str = ""
    start_date: str = ""

    # epoch-millis (int) or ISO string, "" when unknown
    submitted_at: Union[int, str] = ""

    interests: List[str] = Field(default_factory=list)
    status: EnrollmentStatus = "pending"
    notes: str = ""

    def submitted_at_datetime(self) -> Optional[datetime]:
        return parse_timestamp(self.submitted_at)


class EnrollmentFilters(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    search: str = ""
    course: str = "all"
    status: Union[EnrollmentStatus, Literal["all"]] = "all"
    # Tracked for the range chips only; filtering ignores it
    time_range: TimeRange = "30d"


class EnrollmentStats(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    waitlisted: int = 0


class StatusChange(BaseModel):
    status: str


def parse_timestamp(value) -> Optional[datetime]:
    """Epoch-millis or ISO-8601 string -> aware UTC datetime, None if unparseable."""
    if value is None or value == "" or isinstance(value, bool):
        return None

    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            value = int(text)
        else:
            try:
                dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return None
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt.astimezone(timezone.utc)

    try:
        return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
