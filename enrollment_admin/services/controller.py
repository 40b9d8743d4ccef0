"""Dashboard view-state controller.

Holds the canonical enrollment and course lists (replaced wholesale on every
snapshot), the filter/selection/page state and the state of outstanding
writes. Writes go through the RemoteStore; local data only changes when the
store pushes the next snapshot.
"""
from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel

from enrollment_admin.core.config import settings
from enrollment_admin.core.errors import CourseCapReached, InvalidStatus
from enrollment_admin.models.course import Course, CourseIn
from enrollment_admin.models.enrollment import (
    ENROLLMENT_STATUSES,
    Enrollment,
    EnrollmentFilters,
    EnrollmentStats,
)
from enrollment_admin.services import views
from enrollment_admin.services.export import write_export
from enrollment_admin.services.logger import log_debug, log_error
from enrollment_admin.services.normalizer import normalize_courses, normalize_enrollments
from enrollment_admin.services.remote_store import RemoteStore, Subscription

STATUS_UPDATE_ERROR = "Something went wrong while updating status."
COURSE_SAVE_ERROR = "Something went wrong while saving the course."
COURSE_DELETE_ERROR = "Something went wrong while deleting the course."
COURSES_NOT_LOADED_ERROR = "Courses are still loading. Try again in a moment."


class WriteState(BaseModel):
    loading: bool = False
    error: Optional[str] = None


class DashboardController:
    def __init__(
        self,
        store: RemoteStore,
        enrollments_path: Optional[str] = None,
        courses_path: Optional[str] = None,
        page_size: Optional[int] = None,
        course_cap: Optional[int] = None,
        export_dir: Optional[str] = None,
    ):
        self.store = store
        self.enrollments_path = enrollments_path or settings.ENROLLMENTS_PATH
        self.courses_path = courses_path or settings.COURSES_PATH
        self.page_size = page_size or settings.PAGE_SIZE
        self.course_cap = settings.COURSE_CAP if course_cap is None else course_cap
        self.export_dir = export_dir or settings.EXPORT_DIR

        self.enrollments: List[Enrollment] = []
        self.courses: List[Course] = []
        self.enrollments_loaded = False
        self.courses_loaded = False

        self.filters = EnrollmentFilters()
        self.selected_id: Optional[str] = None
        self.page = 1

        self.status_write = WriteState()
        self.course_write = WriteState()
        self.delete_write = WriteState()

        self._subscriptions: List[Subscription] = []

    # -------------------------
    # Subscription lifecycle
    # -------------------------
    def start(self):
        if self._subscriptions:
            return
        self._subscriptions = [
            self.store.subscribe(self.enrollments_path, self._on_enrollments),
            self.store.subscribe(self.courses_path, self._on_courses),
        ]

    def stop(self):
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.close()

    @property
    def running(self) -> bool:
        return bool(self._subscriptions)

    def _on_enrollments(self, raw):
        self.enrollments = normalize_enrollments(raw)
        self.enrollments_loaded = True
        self.page = 1
        log_debug("enrollments_snapshot", {"count": len(self.enrollments)})

    def _on_courses(self, raw):
        self.courses = normalize_courses(raw)
        self.courses_loaded = True
        log_debug("courses_snapshot", {"count": len(self.courses)})

    # -------------------------
    # Intents
    # -------------------------
    def set_filters(self, **changes) -> EnrollmentFilters:
        merged = {**self.filters.model_dump(), **changes}
        self.filters = EnrollmentFilters(**merged)
        self.page = 1
        return self.filters

    def reset_filters(self):
        self.filters = EnrollmentFilters()
        self.page = 1

    def select(self, enrollment_id: Optional[str]):
        self.selected_id = enrollment_id

    def go_to_page(self, page_number: int) -> int:
        total = views.total_pages_for(len(self.filtered_enrollments), self.page_size)
        self.page = views.clamp_page(page_number, total)
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.page - 1)

    # -------------------------
    # Projections
    # -------------------------
    @property
    def filtered_enrollments(self) -> List[Enrollment]:
        return views.apply_filters(self.enrollments, self.filters)

    @property
    def active_enrollment(self) -> Optional[Enrollment]:
        return views.select_active(self.filtered_enrollments, self.selected_id)

    @property
    def current_page(self) -> views.Page:
        return views.paginate(self.filtered_enrollments, self.page_size, self.page)

    @property
    def stats(self) -> EnrollmentStats:
        return views.aggregate(self.filtered_enrollments)

    @property
    def course_options(self) -> List[Dict[str, str]]:
        return [{"id": c.id, "title": c.title} for c in self.courses]

    @property
    def at_course_cap(self) -> bool:
        return len(self.courses) >= self.course_cap

    def get_course(self, course_id: str) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    # -------------------------
    # Writes
    # -------------------------
    async def change_status(self, enrollment_id: str, new_status: str) -> bool:
        if not enrollment_id or not new_status:
            return False
        if self.status_write.loading:
            log_debug("status_change_ignored", {"id": enrollment_id, "reason": "write in flight"})
            return False
        if new_status not in ENROLLMENT_STATUSES:
            self.status_write = WriteState(error=str(InvalidStatus(new_status)))
            return False

        self.status_write = WriteState(loading=True)
        try:
            await self.store.update(self.enrollments_path, enrollment_id, {"status": new_status})
        except Exception as exc:
            log_error("status_change_failed", {"id": enrollment_id, "status": new_status, "error": repr(exc)})
            self.status_write = WriteState(error=STATUS_UPDATE_ERROR)
            return False

        self.status_write = WriteState()
        return True

    async def save_course(self, existing_id: Optional[str], payload: Union[CourseIn, dict]) -> Optional[str]:
        """Update `existing_id`, or create a new course when it is None and the cap allows."""
        if self.course_write.loading:
            log_debug("course_save_ignored", {"id": existing_id, "reason": "write in flight"})
            return None

        body = payload.to_store() if isinstance(payload, CourseIn) else dict(payload)

        if not existing_id and not self.courses_loaded:
            # the cap cannot be checked before the first course snapshot
            self.course_write = WriteState(error=COURSES_NOT_LOADED_ERROR)
            return None
        if not existing_id and self.at_course_cap:
            self.course_write = WriteState(error=str(CourseCapReached(self.course_cap)))
            return None

        self.course_write = WriteState(loading=True)
        try:
            if existing_id:
                await self.store.update(self.courses_path, existing_id, body)
                course_id = existing_id
            else:
                course_id = await self.store.create(self.courses_path, body)
        except Exception as exc:
            log_error("course_save_failed", {"id": existing_id, "error": repr(exc)})
            self.course_write = WriteState(error=COURSE_SAVE_ERROR)
            return None

        self.course_write = WriteState()
        return course_id

    async def delete_course(self, course_id: str) -> bool:
        if not course_id:
            return False
        if self.delete_write.loading:
            return False

        self.delete_write = WriteState(loading=True)
        try:
            await self.store.delete(self.courses_path, course_id)
        except Exception as exc:
            log_error("course_delete_failed", {"id": course_id, "error": repr(exc)})
            self.delete_write = WriteState(error=COURSE_DELETE_ERROR)
            return False

        self.delete_write = WriteState()
        return True

    # -------------------------
    # Export
    # -------------------------
    def export_enrollments(self, directory: Optional[str] = None, today: Optional[date] = None) -> Path:
        path = write_export(self.filtered_enrollments, directory or self.export_dir, today=today)
        log_debug("enrollments_exported", {"path": str(path), "rows": len(self.filtered_enrollments)})
        return path
