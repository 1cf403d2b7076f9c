"""
Bulk Upload API endpoints.

File import for contracts and contacts, template downloads, and the
upload audit log.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from federaltalks.api.deps import get_auth_session, get_store, require_permission
from federaltalks.config import UPLOAD_KINDS
from federaltalks.schemas.upload import UploadLogResponse, UploadResult
from federaltalks.services.auth import AuthSession
from federaltalks.services.bulk_upload import run_bulk_upload
from federaltalks.services.errors import FileReadError, UnsupportedFormat
from federaltalks.services.store import TableStore
from federaltalks.services.template_generator import generate_template

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_kind(kind: str) -> None:
    if kind not in UPLOAD_KINDS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Upload kind must be one of: {', '.join(UPLOAD_KINDS)}",
        )


@router.get("/templates/{kind}")
async def download_template(
    kind: str,
    fmt: str = Query("csv", alias="format", description="csv or xlsx"),
    session: AuthSession = Depends(get_auth_session),
):
    """Download a blank upload template with one sample row."""
    _check_kind(kind)

    try:
        template = generate_template(kind, fmt)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return Response(
        content=template.content,
        media_type=template.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{template.filename}"'},
    )


@router.get("/logs", response_model=List[UploadLogResponse])
async def list_upload_logs(
    limit: int = Query(100, ge=1, le=1000),
    session: AuthSession = Depends(require_permission("view_upload_logs")),
    store: TableStore = Depends(get_store),
):
    """Upload history, newest first."""
    return store.select("upload_logs", order=["-created_at"], limit=limit)


@router.post("/{kind}", response_model=UploadResult)
async def upload_file(
    kind: str,
    file: UploadFile = File(...),
    session: AuthSession = Depends(get_auth_session),
    store: TableStore = Depends(get_store),
):
    """
    Import a CSV / XLSX / XLS file.

    Rows are validated and inserted one at a time; the response lists
    every rejected row. Unreadable or unsupported files are rejected
    before anything is written.
    """
    _check_kind(kind)
    if not session.has_permission(f"upload_{kind}"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Missing permission: upload_{kind}",
        )

    filename = file.filename or ""
    content = await file.read()

    try:
        summary = run_bulk_upload(
            store,
            kind=kind,
            filename=filename,
            content=content,
            uploaded_by=session.user_id,
            content_type=file.content_type,
        )
    except UnsupportedFormat as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(e),
        )
    except FileReadError as e:
        logger.warning(f"Unreadable upload {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error reading file: {e}",
        )

    return UploadResult(success_count=summary.success_count, total=summary.total, errors=summary.errors)
