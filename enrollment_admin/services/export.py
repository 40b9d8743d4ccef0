"""CSV export of enrollment applications."""
import csv
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from enrollment_admin.models.enrollment import Enrollment

EXPORT_COLUMNS = [
    "ID",
    "Child Name",
    "Parent Name",
    "Parent Email",
    "Course",
    "Status",
    "Submitted At",
    "Preferred Time",
    "Start Date",
    "Child Age",
    "Interests",
    "Notes",
]


def _submitted_date(enrollment: Enrollment) -> str:
    dt = enrollment.submitted_at_datetime()
    if dt is not None:
        return dt.date().isoformat()
    return str(enrollment.submitted_at or "")


def export_row(enrollment: Enrollment) -> dict:
    return {
        "ID": enrollment.id,
        "Child Name": enrollment.child_name,
        "Parent Name": enrollment.parent_name,
        "Parent Email": enrollment.parent_email,
        "Course": enrollment.course,
        "Status": enrollment.status,
        "Submitted At": _submitted_date(enrollment),
        "Preferred Time": enrollment.preferred_time,
        "Start Date": enrollment.start_date,
        "Child Age": enrollment.child_age,
        "Interests": ", ".join(enrollment.interests),
        "Notes": enrollment.notes,
    }


def build_export_frame(enrollments: Sequence[Enrollment]) -> pd.DataFrame:
    return pd.DataFrame([export_row(e) for e in enrollments], columns=EXPORT_COLUMNS, dtype=str)


def enrollments_to_csv(enrollments: Sequence[Enrollment]) -> str:
    """
    Render enrollments as CSV text. The header row is bare; every data
    field is quoted (quotes doubled), so the ", "-joined interests list is
    always one quoted field, even with zero or one interest.
    """
    frame = build_export_frame(enrollments)
    header = ",".join(EXPORT_COLUMNS) + "\n"
    rows = frame.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return header + rows


def export_filename(today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"enrollments-{today.isoformat()}.csv"


def write_export(enrollments: Sequence[Enrollment], directory, today: Optional[date] = None) -> Path:
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(today)
    path.write_text(enrollments_to_csv(enrollments), encoding="utf-8")
    return path
