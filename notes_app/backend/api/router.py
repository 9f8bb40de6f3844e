"""
API Router.

Aggregates all endpoint routers mounted under the API prefix.
"""

from fastapi import APIRouter

from notes_app.backend.api.endpoints import auth, notes

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
