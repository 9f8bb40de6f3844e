"""
Notes API Endpoints.

REST API endpoints for the acting user's notes.
"""

from fastapi import APIRouter, Depends, Query, Response

from notes_app.backend.core.dependencies import CurrentUserId, DbSession, NoteId
from notes_app.backend.core.exceptions import NotFoundError
from notes_app.backend.core.pagination import PaginationParams, get_pagination_params
from notes_app.backend.repositories.note import NoteListOptions
from notes_app.backend.schemas.note import (
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NoteResponse,
    NoteUpdate,
)
from notes_app.backend.services.note import NOTE_NOT_FOUND, NoteService

router = APIRouter()


def parse_archived_flag(value: str | None) -> bool | None:
    """Absent means no filter; exactly "true" or "1" means archived; any other value means active."""
    if value is None:
        return None
    return value in ("true", "1")


def get_list_options(
    pagination: PaginationParams = Depends(get_pagination_params),
    q: str | None = Query(default=None, description="Free-text search over title and content"),
    tag: str | None = Query(default=None, description="Only notes carrying this exact tag"),
    archived: str | None = Query(default=None, description="true/1 for archived, other values for active"),
    sort_by: str | None = Query(
        default=None,
        alias="sortBy",
        description="createdAt, updatedAt or title (default updatedAt)",
    ),
    sort_dir: str | None = Query(
        default=None,
        alias="sortDir",
        description="asc or desc (default desc)",
    ),
) -> NoteListOptions:
    """Collect listing query parameters; bad values fall back to defaults."""
    return NoteListOptions(
        search=q,
        tag=tag,
        archived=parse_archived_flag(archived),
        sort_by=sort_by,
        sort_dir=sort_dir,
        limit=pagination.limit,
        offset=pagination.offset,
    )


@router.post(
    "",
    response_model=NoteEnvelope,
    status_code=201,
    summary="Create a note",
    description="Create a note with a title and optional content, tags and archive flag.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    user_id: CurrentUserId,
) -> NoteEnvelope:
    service = NoteService(db)
    note = await service.create_note(user_id, data)
    return NoteEnvelope(note=NoteResponse.model_validate(note))


@router.get(
    "",
    response_model=NoteListEnvelope,
    summary="List notes",
    description="Search, filter, sort and page through the caller's notes.",
)
async def list_notes(
    db: DbSession,
    user_id: CurrentUserId,
    options: NoteListOptions = Depends(get_list_options),
) -> NoteListEnvelope:
    service = NoteService(db)
    notes = await service.list_notes(user_id, options)
    return NoteListEnvelope(notes=[NoteResponse.model_validate(note) for note in notes])


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    summary="Get a note",
)
async def get_note(
    user_id: CurrentUserId,
    note_id: NoteId,
    db: DbSession,
) -> NoteEnvelope:
    service = NoteService(db)
    note = await service.get_note(user_id, note_id)
    return NoteEnvelope(note=NoteResponse.model_validate(note))


@router.api_route(
    "/{note_id}",
    methods=["PUT", "PATCH"],
    response_model=NoteEnvelope,
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
async def update_note(
    user_id: CurrentUserId,
    note_id: NoteId,
    data: NoteUpdate,
    db: DbSession,
) -> NoteEnvelope:
    service = NoteService(db)
    note = await service.update_note(user_id, note_id, data)
    return NoteEnvelope(note=NoteResponse.model_validate(note))


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a note",
    description="Permanently delete a note.",
)
async def delete_note(
    user_id: CurrentUserId,
    note_id: NoteId,
    db: DbSession,
) -> Response:
    service = NoteService(db)
    if not await service.delete_note(user_id, note_id):
        raise NotFoundError(NOTE_NOT_FOUND)
    return Response(status_code=204)
