# enrollment_admin/core/config.py
from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Service account JSON for the Firebase Admin SDK
    FIREBASE_CREDENTIALS: str = "enrollment_admin/core/firebase_key.json"
    FIREBASE_DATABASE_URL: str = "https://polycrest-kids1-default-rtdb.firebaseio.com/"

    # "memory" runs the dashboard against an in-process store (local dev)
    STORE_BACKEND: Literal["firebase", "memory"] = "firebase"

    ENROLLMENTS_PATH: str = "enrollments"
    COURSES_PATH: str = "courses"

    # Max number of live courses; checked before every create
    COURSE_CAP: int = 4
    PAGE_SIZE: int = 7

    EXPORT_DIR: str = "exports"
    DEBUG_MODE: bool = True

    # If you want to read from a .env file, keep this:
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
