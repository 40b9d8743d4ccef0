from fastapi import APIRouter, Body, Depends, HTTPException

from enrollment_admin.api.deps import get_controller
from enrollment_admin.models.course import CourseIn
from enrollment_admin.services.controller import DashboardController

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("/")
async def list_courses(controller: DashboardController = Depends(get_controller)):
    return {
        "items": controller.courses,
        "cap": controller.course_cap,
        "at_cap": controller.at_course_cap,
    }


@router.get("/{course_id}")
async def get_course(course_id: str, controller: DashboardController = Depends(get_controller)):
    course = controller.get_course(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.post("/", status_code=201)
async def create_course(
    payload: CourseIn = Body(...),
    controller: DashboardController = Depends(get_controller),
):
    if controller.course_write.loading:
        raise HTTPException(status_code=409, detail="A course save is already in progress")
    if not controller.courses_loaded:
        raise HTTPException(status_code=503, detail="Courses are still loading. Try again in a moment.")
    if controller.at_course_cap:
        raise HTTPException(
            status_code=409,
            detail=f"You can only keep {controller.course_cap} courses. Delete one before adding another.",
        )

    course_id = await controller.save_course(None, payload)
    if course_id is None:
        raise HTTPException(status_code=502, detail=controller.course_write.error)
    return {"id": course_id}


@router.put("/{course_id}")
async def update_course(
    course_id: str,
    payload: CourseIn = Body(...),
    controller: DashboardController = Depends(get_controller),
):
    if controller.course_write.loading:
        raise HTTPException(status_code=409, detail="A course save is already in progress")

    saved = await controller.save_course(course_id, payload)
    if saved is None:
        raise HTTPException(status_code=502, detail=controller.course_write.error)
    return {"id": saved}


@router.delete("/{course_id}")
async def delete_course(course_id: str, controller: DashboardController = Depends(get_controller)):
    # The dashboard asks for confirmation before calling this
    if controller.delete_write.loading:
        raise HTTPException(status_code=409, detail="A course delete is already in progress")

    ok = await controller.delete_course(course_id)
    if not ok:
        raise HTTPException(status_code=502, detail=controller.delete_write.error)
    return {"message": "Course deleted"}
