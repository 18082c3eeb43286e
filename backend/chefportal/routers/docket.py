from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import current_candidate
from chefportal.models.user import User
from chefportal.responses import docket_envelope
from chefportal.schemas.docket import DocketEnvelope, DocketUpdate, DocketUploadResponse
from chefportal.services import audit_service, docket_service
from chefportal.services.docket_progress import calculate_progress, can_submit, missing_items
from chefportal.services.docket_service import DOCUMENT_TYPES
from chefportal.services.file_service import UploadRejected, save_upload
from chefportal.utils.timestamps import now_iso

router = APIRouter(prefix="/docket", tags=["docket"])


@router.get("", response_model=DocketEnvelope)
async def get_docket(user: User = Depends(current_candidate)):
    return docket_envelope(user.docket)


@router.patch("", response_model=DocketEnvelope)
async def update_docket(
    req: DocketUpdate,
    user: User = Depends(current_candidate),
    db: Session = Depends(get_db),
):
    docket = docket_service.get_or_create(db, user.id)
    updates = req.model_dump(exclude_unset=True)
    if updates.get("references") is None:
        updates.pop("references", None)
    docket_service.apply_patch(docket, updates)
    db.commit()
    db.refresh(docket)
    audit_service.record(db, "UPDATE", "docket", entity_id=docket.id, user_id=user.id,
                         details={"fields": sorted(updates)})
    return docket_envelope(docket)


@router.post("/upload", response_model=DocketUploadResponse, status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    document_type: str = Form(..., alias="documentType"),
    user: User = Depends(current_candidate),
    db: Session = Depends(get_db),
):
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
                         description=f"Uploaded {document_type}: {stored.name}",
                         details={"document_type": document_type, "size": stored.size})

    envelope = docket_envelope(docket)
    return DocketUploadResponse(**envelope.model_dump(), field=column, url=stored.url)


@router.post("/submit", response_model=DocketEnvelope)
async def submit_docket(user: User = Depends(current_candidate), db: Session = Depends(get_db)):
    progress = calculate_progress(user.docket)
    if not can_submit(progress):
        raise HTTPException(
            status_code=400,
            detail={
                "error": "docket_incomplete",
                "completed": progress.completed,
                "missing": missing_items(user.docket),
            },
        )
    user.docket_completed = True
    user.updated_at = now_iso()
    db.commit()
    db.refresh(user)
    audit_service.record(db, "STATUS_CHANGE", "docket", entity_id=user.docket.id, user_id=user.id,
                         description=f"Docket submitted with {progress.completed}/{progress.total} items")
    return docket_envelope(user.docket)
