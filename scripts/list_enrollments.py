from enrollment_admin.core.config import settings
from enrollment_admin.core.firebase import get_reference
from enrollment_admin.services.normalizer import normalize_enrollments
from enrollment_admin.services.views import aggregate


def list_enrollments(limit: int = 10):
    print("\n========= ENROLLMENTS =========")
    records = normalize_enrollments(get_reference(settings.ENROLLMENTS_PATH).get())

    if not records:
        print("\n(No enrollments found)")
        return

    for record in records[:limit]:
        print(f"- {record.id}: {record.child_name or '?'} / {record.parent_name or '?'} "
              f"| {record.course or record.course_id or '-'} | {record.status}")

    stats = aggregate(records)
    print(f"\nTotal {stats.total}: pending {stats.pending}, approved {stats.approved}, "
          f"waitlisted {stats.waitlisted}")
    print("\n===============================")


if __name__ == "__main__":
    list_enrollments()
