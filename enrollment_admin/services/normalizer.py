"""Normalize raw Realtime Database records into canonical models.

The enrollment form has been through several revisions, so older records
use different field names (e.g. `kidName`, `timestamp`). Each canonical field
lists its candidate source fields newest first; the first non-empty value
wins. Nothing in here raises: unknown shapes degrade to defaults.
"""
from typing import Any, Iterable, List, Tuple

from enrollment_admin.models.course import Course, LearningPoint
from enrollment_admin.models.enrollment import ENROLLMENT_STATUSES, Enrollment
from enrollment_admin.services.logger import log_debug

ENROLLMENT_FIELD_SOURCES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("child_name", ("childName", "kidName")),
    ("child_age", ("childAge", "kidAge")),
    ("child_gender", ("childGender", "kidGender")),
    ("parent_name", ("parentName", "guardianName")),
    ("parent_email", ("parentEmail", "email")),
    ("parent_phone", ("parentPhone", "phone")),
    ("parent_relation", ("parentRelation", "relation")),
    ("course", ("course", "courseName", "courseTitle")),
    ("course_id", ("courseId", "selectedCourse")),
    ("preferred_time", ("preferredTime", "timeSlot")),
    ("start_date", ("startDate", "preferredStartDate")),
    ("submitted_at", ("submittedAt", "timestamp", "createdAt")),
    ("interests", ("interests", "kidInterests")),
    ("status", ("status",)),
    ("notes", ("notes", "additionalNotes", "message")),
)

COURSE_TEXT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("title", "title"),
    ("age_range", "ageRange"),
    ("thumbnail_url", "thumbnailUrl"),
    ("short_description", "shortDescription"),
    ("learning_outcomes", "learningOutcomes"),
    ("duration", "duration"),
    ("schedule", "schedule"),
    ("session_length", "sessionLength"),
    ("prerequisites", "prerequisites"),
)


# -------------------------
# Helpers
# -------------------------
def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def _first_present(raw: dict, candidates: Iterable[str]) -> Any:
    for name in candidates:
        value = raw.get(name)
        if not _is_empty(value):
            return value
    return None


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _entries(raw: Any) -> List[Tuple[str, Any]]:
    """Keyed map or list (the database's shape for integer keys) -> (key, value) pairs."""
    if isinstance(raw, dict):
        return [(str(k), v) for k, v in raw.items() if v is not None]
    if isinstance(raw, list):
        return [(str(i), v) for i, v in enumerate(raw) if v is not None]
    return []


def _values(raw: Any) -> List[Any]:
    return [value for _, value in _entries(raw)]


def _string_list(raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    return [_text(item) for item in _values(raw) if item and _text(item)]


def _timestamp(value: Any):
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return ""


def _millis(value: Any):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


# -------------------------
# Enrollments
# -------------------------
def normalize_enrollment(record_id: str, raw: Any) -> Enrollment:
    if not isinstance(raw, dict):
        return Enrollment(id=record_id)

    fields = {}
    for canonical, candidates in ENROLLMENT_FIELD_SOURCES:
        fields[canonical] = _first_present(raw, candidates)

    status = _text(fields["status"]).lower()
    if status not in ENROLLMENT_STATUSES:
        status = "pending"

    return Enrollment(
        id=record_id,
        child_name=_text(fields["child_name"]),
        child_age=_text(fields["child_age"]),
        child_gender=_text(fields["child_gender"]),
        parent_name=_text(fields["parent_name"]),
        parent_email=_text(fields["parent_email"]),
        parent_phone=_text(fields["parent_phone"]),
        parent_relation=_text(fields["parent_relation"]),
        course=_text(fields["course"]),
        course_id=_text(fields["course_id"]),
        preferred_time=_text(fields["preferred_time"]),
        start_date=_text(fields["start_date"]),
        submitted_at=_timestamp(fields["submitted_at"]),
        interests=_string_list(fields["interests"]),
        status=status,
        notes=_text(fields["notes"]),
    )


def normalize_enrollments(raw: Any) -> List[Enrollment]:
    """Collection snapshot -> enrollments in key order. None/empty -> []."""
    items = [normalize_enrollment(key, value) for key, value in _entries(raw)]
    log_debug("enrollments_normalized", {"count": len(items)})
    return items


# -------------------------
# Courses
# -------------------------
def normalize_learning_point(raw: Any) -> LearningPoint:
    if isinstance(raw, str):
        return LearningPoint(title=raw.strip())
    if not isinstance(raw, dict):
        return LearningPoint()

    points = [_text(p) for p in _values(raw.get("subtopicPoints"))]
    return LearningPoint(
        title=_text(raw.get("title")),
        description=_text(raw.get("description")),
        subtopic_title=_text(raw.get("subtopicTitle")),
        subtopic_points=points or [""],
    )


def normalize_course(record_id: str, raw: Any) -> Course:
    if not isinstance(raw, dict):
        return Course(id=record_id)

    fields = {attr: _text(raw.get(key)) for attr, key in COURSE_TEXT_FIELDS}
    return Course(
        id=record_id,
        what_you_will_learn=[normalize_learning_point(p) for p in _values(raw.get("whatYouWillLearn"))],
        created_at=_millis(raw.get("createdAt")),
        updated_at=_millis(raw.get("updatedAt")),
        **fields,
    )


def normalize_courses(raw: Any) -> List[Course]:
    items = [normalize_course(key, value) for key, value in _entries(raw)]
    log_debug("courses_normalized", {"count": len(items)})
    return items
