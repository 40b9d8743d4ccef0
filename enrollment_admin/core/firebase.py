"""
Firebase admin initialization and helpers.

This module initializes the Firebase Admin SDK for the enrollment dashboard.
Enrollment applications and the course catalog live in the Firebase
Realtime Database; the backend reads and writes them through the Admin SDK
`db` module.
"""

import os
import firebase_admin
from firebase_admin import credentials, db as rtdb

from enrollment_admin.core.config import settings

# Global reference to avoid re-initialization
_firebase_app = None


def init_firebase():
    """
    Initialize Firebase Admin SDK if not already initialized.

    Priority:
    1. Use FIREBASE_CREDENTIALS environment variable if set
    2. Fallback to local dev file: enrollment_admin/core/firebase_key.json
    """

    global _firebase_app

    # Prevent re-initialization (important for Uvicorn reload)
    if firebase_admin._apps:
        return

    cred_path = os.environ.get("FIREBASE_CREDENTIALS", settings.FIREBASE_CREDENTIALS)

    if not os.path.exists(cred_path):
        raise RuntimeError(
            f"Firebase credentials not found at: {cred_path}\n"
            "Set FIREBASE_CREDENTIALS env var or place firebase_key.json correctly."
        )

    # The Realtime Database needs its URL at app level
    cred = credentials.Certificate(cred_path)
    _firebase_app = firebase_admin.initialize_app(
        cred, {"databaseURL": settings.FIREBASE_DATABASE_URL}
    )


def get_reference(path: str = "/"):
    """Return a Realtime Database reference, initializing the SDK on first use."""
    init_firebase()
    return rtdb.reference(path)
