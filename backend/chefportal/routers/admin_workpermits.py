import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import load_user, require_admin
from chefportal.models.user import User
from chefportal.models.work_permit import WorkPermit
from chefportal.responses import work_permit_to_response
from chefportal.schemas.work_permit import (
    AdminWorkPermitRow,
    WorkPermitResponse,
    WorkPermitUpdate,
    WorkPermitUpdateResponse,
)
from chefportal.services import audit_service, work_permit_service
from chefportal.services.file_service import PDF_ONLY, UploadRejected, save_upload
from chefportal.services.work_permit_service import (
    VALID_STATUSES,
    FinalDocketNotAllowed,
    can_upload_final_docket,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-workpermits"])


@router.get("/workpermits", response_model=list[AdminWorkPermitRow], dependencies=[Depends(require_admin)])
async def list_work_permits(status: str | None = None, db: Session = Depends(get_db)):
    if status and status not in VALID_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {sorted(VALID_STATUSES)}")
    query = (
        db.query(WorkPermit, User)
        .join(User, User.id == WorkPermit.user_id)
        .filter(User.archived.is_(False))
    )
    if status:
        query = query.filter(WorkPermit.status == status)
    return [
        AdminWorkPermitRow(
            user_id=user.id,
            email=user.email,
            display_name=user.display_name,
            work_permit=work_permit_to_response(permit),
        )
        for permit, user in query.order_by(WorkPermit.last_updated.desc()).all()
    ]


@router.get("/workpermit/{user_id}", response_model=WorkPermitResponse, dependencies=[Depends(require_admin)])
async def get_work_permit(user_id: str, db: Session = Depends(get_db)):
    user = load_user(db, user_id)
    permit = work_permit_service.get_or_create(db, user.id)
    db.commit()
    return work_permit_to_response(permit)


@router.put("/workpermit/{user_id}", response_model=WorkPermitUpdateResponse)
async def update_work_permit(
    user_id: str,
    req: WorkPermitUpdate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    if req.status is not None and req.status not in VALID_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {sorted(VALID_STATUSES)}")

    user = load_user(db, user_id)
    permit = work_permit_service.get_or_create(db, user.id)
    previous = permit.status
    check = work_permit_service.apply_update(
        permit,
        status=req.status,
        tracking_code=req.tracking_code,
        notes=req.notes,
        fields_set=req.model_fields_set,
    )
    db.commit()
    db.refresh(permit)

    if check.warnings:
        logger.warning("Work permit %s -> %s for %s: %s", previous, permit.status, user.email,
                       ", ".join(check.warnings))
    action = "STATUS_CHANGE" if previous != permit.status else "UPDATE"
    audit_service.record(
        db, action, "workpermit", entity_id=permit.id, user_id=user.id, admin_email=admin["subject"],
        severity="warning" if check.warnings else "info",
        description=f"Work permit {previous} -> {permit.status}",
        details={"from": previous, "to": permit.status, "warnings": check.warnings},
    )
    return WorkPermitUpdateResponse(work_permit=work_permit_to_response(permit), warnings=check.warnings)


@router.post("/workpermit/{user_id}/upload-docket", response_model=WorkPermitUpdateResponse)
async def upload_final_docket(
    user_id: str,
    pdf: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    user = load_user(db, user_id)
    permit = work_permit_service.get_or_create(db, user.id)
    # Gate before anything is written to disk.
    if not can_upload_final_docket(permit.status):
        raise HTTPException(
            status_code=409,
            detail=f"Final docket upload requires status applied or later (current: {permit.status})",
        )
    try:
        stored = await save_upload(user.id, "workpermit", pdf, PDF_ONLY)
    except UploadRejected as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)

    previous = permit.status
    try:
        advanced = work_permit_service.attach_final_docket(permit, stored.url)
    except FinalDocketNotAllowed as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    db.commit()
    db.refresh(permit)

    audit_service.record(db, "UPLOAD", "workpermit", entity_id=permit.id, user_id=user.id,
                         admin_email=admin["subject"], description=f"Final docket uploaded: {stored.name}")
    if advanced:
        audit_service.record(db, "STATUS_CHANGE", "workpermit", entity_id=permit.id, user_id=user.id,
                             admin_email=admin["subject"], description=f"Work permit {previous} -> approved")
    return WorkPermitUpdateResponse(
        work_permit=work_permit_to_response(permit),
        warnings=["status_auto_approved"] if advanced else [],
    )
