from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import load_user, require_admin
from chefportal.models.user import User
from chefportal.responses import docket_envelope, docket_to_response, progress_to_response, user_to_response
from chefportal.schemas.docket import (
    AdminDocketListResponse,
    AdminDocketRow,
    DocketEnvelope,
    DocketUploadResponse,
)
from chefportal.services import audit_service, docket_service
from chefportal.services.docket_progress import admin_checklist, calculate_progress, checklist_status
from chefportal.services.docket_service import DOCUMENT_TYPES
from chefportal.services.file_service import UploadRejected, save_upload
from chefportal.services.pdf_service import generate_docket_summary_pdf
from chefportal.services.status_labels import DOCKET_FILTERS, classify_progress
from chefportal.utils.timestamps import now_iso

router = APIRouter(prefix="/admin", tags=["admin-dockets"])


@router.get("/dockets", response_model=AdminDocketListResponse, dependencies=[Depends(require_admin)])
async def list_dockets(
    status_filter: str | None = Query(None, alias="filter"),
    search: str | None = None,
    include_archived: bool = False,
    db: Session = Depends(get_db),
):
    if status_filter and status_filter not in DOCKET_FILTERS:
        raise HTTPException(status_code=400, detail=f"Invalid filter. Must be one of: {sorted(DOCKET_FILTERS)}")

    query = db.query(User)
    if not include_archived:
        query = query.filter(User.archived.is_(False))
    checklist = admin_checklist()

    rows = []
    for user in query.all():
        progress = calculate_progress(user.docket, checklist)
        rows.append((user, progress))

    counts = {
        "completed": sum(1 for _, p in rows if DOCKET_FILTERS["completed"](p.percentage)),
        "in_progress": sum(1 for _, p in rows if DOCKET_FILTERS["in-progress"](p.percentage)),
        "not_started": sum(1 for _, p in rows if DOCKET_FILTERS["not-started"](p.percentage)),
    }

    if status_filter:
        rows = [(u, p) for u, p in rows if DOCKET_FILTERS[status_filter](p.percentage)]
    if search:
        needle = search.strip().lower()
        rows = [
            (u, p) for u, p in rows
            if any(needle in (value or "").lower() for value in (u.email, u.display_name, u.phone, u.uid))
        ]
    rows.sort(key=lambda row: row[1].percentage, reverse=True)

    return AdminDocketListResponse(
        dockets=[
            AdminDocketRow(
                user=user_to_response(u),
                docket=docket_to_response(u.docket),
                progress=progress_to_response(p),
            )
            for u, p in rows
        ],
        total=len(rows),
        **counts,
    )


@router.get("/docket/{user_id}", response_model=DocketEnvelope, dependencies=[Depends(require_admin)])
async def get_docket(user_id: str, db: Session = Depends(get_db)):
    user = load_user(db, user_id)
    return docket_envelope(user.docket, admin_checklist())


@router.post("/docket/{user_id}/upload", response_model=DocketUploadResponse, status_code=201)
async def upload_document(
    user_id: str,
    file: UploadFile = File(...),
    document_type: str = Form(..., alias="documentType"),
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    user = load_user(db, user_id)
    if document_type not in DOCUMENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid documentType. Must be one of: {sorted(DOCUMENT_TYPES)}",
        )
    try:
        stored = await save_upload(user.id, "docket", file)
    except UploadRejected as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)

    docket = docket_service.get_or_create(db, user.id)
    column = docket_service.attach_document(docket, document_type, stored)
    db.commit()
    db.refresh(docket)
    audit_service.record(db, "UPLOAD", "docket", entity_id=docket.id, user_id=user.id,
                         admin_email=admin["subject"],
                         description=f"Admin uploaded {document_type}: {stored.name}",
                         details={"document_type": document_type, "size": stored.size})

    envelope = docket_envelope(docket, admin_checklist())
    return DocketUploadResponse(**envelope.model_dump(), field=column, url=stored.url)


@router.get("/docket/{user_id}/summary.pdf", dependencies=[Depends(require_admin)])
async def docket_summary(user_id: str, db: Session = Depends(get_db)):
    user = load_user(db, user_id)
    checklist = admin_checklist()
    progress = calculate_progress(user.docket, checklist)
    name = user.display_name or " ".join(filter(None, (user.first_name, user.last_name))) or user.email or user.id

    pdf_bytes = generate_docket_summary_pdf(
        candidate_name=name,
        email=user.email,
        uid=user.uid,
        progress=progress,
        label=classify_progress(progress.percentage),
        checklist=checklist_status(user.docket, checklist),
        generated_at=now_iso(),
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="docket_{user.uid or user.id[:8]}.pdf"'},
    )
