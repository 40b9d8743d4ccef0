import asyncio

from fastapi import FastAPI

from enrollment_admin.api.routes import courses, enrollments
from enrollment_admin.core.config import settings
from enrollment_admin.core.firebase import init_firebase
from enrollment_admin.services.controller import DashboardController
from enrollment_admin.services.logger import log_debug
from enrollment_admin.services.memory_store import InMemoryRemoteStore
from enrollment_admin.services.remote_store import FirebaseRemoteStore

app = FastAPI(title="Enrollment Admin Dashboard")


def build_store(loop=None):
    if settings.STORE_BACKEND == "memory":
        return InMemoryRemoteStore()

    # Initialize Firebase Admin (reads credentials path from env)
    init_firebase()
    return FirebaseRemoteStore(loop=loop)


@app.on_event("startup")
async def startup():
    """Connect to the data store and start the live subscriptions."""
    store = build_store(loop=asyncio.get_running_loop())
    controller = DashboardController(store)
    controller.start()
    app.state.controller = controller
    log_debug("dashboard_started", {"backend": settings.STORE_BACKEND})


@app.on_event("shutdown")
async def shutdown():
    controller = getattr(app.state, "controller", None)
    if controller is not None:
        controller.stop()


@app.get("/")
async def root():
    return {"message": "Enrollment Admin Dashboard is running"}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


# Include API routers
app.include_router(enrollments.router)
app.include_router(courses.router)
