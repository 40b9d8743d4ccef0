"""
API dependencies.

Provides FastAPI dependencies that hand routes the dashboard controller
created at startup.
"""

from fastapi import HTTPException, Request

from enrollment_admin.services.controller import DashboardController


def get_controller(request: Request) -> DashboardController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Dashboard is not connected to the data store yet")
    return controller
