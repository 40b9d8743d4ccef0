"""Enrollment application routes.

Query parameters are forwarded to the controller as intents (filter change,
selection, page navigation); every response is a projection of the
controller's current state.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import ValidationError

from enrollment_admin.api.deps import get_controller
from enrollment_admin.models.enrollment import ENROLLMENT_STATUSES, StatusChange
from enrollment_admin.services.controller import DashboardController
from enrollment_admin.services.export import enrollments_to_csv, export_filename
from enrollment_admin.services.views import overview_cards

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.get("/")
async def list_enrollments(
    search: Optional[str] = Query(None),
    course: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    time_range: Optional[str] = Query(None),
    selected_id: Optional[str] = Query(None),
    page: Optional[int] = Query(None),
    controller: DashboardController = Depends(get_controller),
):
    """
    Current page of applications plus the active record and stats.

    The dashboard has a single operator, so the controller holds one shared
    view state: supplied filters, selection and page are stored on it and
    seen by every client until changed again.
    """
    changes = {
        key: value
        for key, value in {
            "search": search,
            "course": course,
            "status": status,
            "time_range": time_range,
        }.items()
        if value is not None
    }
    if changes:
        try:
            controller.set_filters(**changes)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid filter: {exc.errors()[0]['msg']}") from exc

    if selected_id is not None:
        controller.select(selected_id)
    if page is not None:
        controller.go_to_page(page)

    current = controller.current_page
    return {
        "items": current.items,
        "page": current.page,
        "total_pages": current.total_pages,
        "active": controller.active_enrollment,
        "stats": controller.stats,
        "filters": controller.filters,
        "courses": controller.course_options,
        "loaded": controller.enrollments_loaded,
    }


@router.post("/filters/reset")
async def reset_filters(controller: DashboardController = Depends(get_controller)):
    controller.reset_filters()
    return {"filters": controller.filters, "page": controller.page}


@router.get("/stats")
async def enrollment_stats(controller: DashboardController = Depends(get_controller)):
    stats = controller.stats
    return {"stats": stats, "cards": overview_cards(stats)}


@router.get("/export")
async def export_enrollments(controller: DashboardController = Depends(get_controller)):
    """Download the filtered (not paginated) applications as CSV."""
    content = enrollments_to_csv(controller.filtered_enrollments)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.patch("/{enrollment_id}/status")
async def change_status(
    enrollment_id: str,
    payload: StatusChange = Body(...),
    controller: DashboardController = Depends(get_controller),
):
    if payload.status not in ENROLLMENT_STATUSES:
        raise HTTPException(status_code=400, detail=f"Unknown status: {payload.status}")
    if controller.status_write.loading:
        raise HTTPException(status_code=409, detail="A status update is already in progress")

    ok = await controller.change_status(enrollment_id, payload.status)
    if not ok:
        raise HTTPException(status_code=502, detail=controller.status_write.error)

    # The record itself changes when the store pushes the next snapshot
    return {"id": enrollment_id, "status": payload.status, "message": "Status update sent"}
