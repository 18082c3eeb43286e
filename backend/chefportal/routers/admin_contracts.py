from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import load_user, require_admin
from chefportal.models.user import User
from chefportal.responses import contract_envelope, contract_to_response, status_to_response
from chefportal.schemas.contract import AdminContractRow, ContractEnvelope, ContractUpdate
from chefportal.services import audit_service, contract_service
from chefportal.services.contract_service import SUB_DOCUMENT_STATUSES
from chefportal.services.file_service import PDF_ONLY, UploadRejected, read_upload, store_file
from chefportal.services.status_labels import classify_contract
from chefportal.utils.timestamps import now_iso

router = APIRouter(prefix="/admin", tags=["admin-contracts"])


@router.get("/contracts", response_model=list[AdminContractRow], dependencies=[Depends(require_admin)])
async def list_contracts(status: str | None = None, db: Session = Depends(get_db)):
    users = db.query(User).filter(User.archived.is_(False)).order_by(User.created_at.desc()).all()
    rows = []
    for user in users:
        label = classify_contract(user.contract)
        if status and label.label.lower().replace(" ", "-") != status.lower():
            continue
        rows.append(AdminContractRow(
            user_id=user.id,
            email=user.email,
            display_name=user.display_name,
            contract=contract_to_response(user.contract),
            status=status_to_response(label),
        ))
    return rows


@router.get("/contract/{user_id}", response_model=ContractEnvelope, dependencies=[Depends(require_admin)])
async def get_contract(user_id: str, db: Session = Depends(get_db)):
    user = load_user(db, user_id)
    return contract_envelope(user.contract)


@router.put("/contract/{user_id}", response_model=ContractEnvelope)
async def update_contract(
    user_id: str,
    req: ContractUpdate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    user = load_user(db, user_id)
    updates = req.model_dump(exclude_unset=True)
    for key in ("company_contract_status", "job_offer_status"):
        if key in updates and updates[key] not in SUB_DOCUMENT_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid {key}. Must be one of: {sorted(SUB_DOCUMENT_STATUSES)}",
            )
        if key in updates and updates[key] is None:
            del updates[key]

    contract = contract_service.get_or_create(db, user.id)
    for key, value in updates.items():
        setattr(contract, key, value)
    contract.last_updated = now_iso()
    db.commit()
    db.refresh(contract)
    audit_service.record(db, "STATUS_CHANGE", "contract", entity_id=contract.id, user_id=user.id,
                         admin_email=admin["subject"], details=updates)
    return contract_envelope(contract)


@router.post("/contract/{user_id}/upload", response_model=ContractEnvelope)
async def upload_originals(
    user_id: str,
    contract_file: UploadFile | None = File(None, alias="contract"),
    job_offer_file: UploadFile | None = File(None, alias="jobOffer"),
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    user = load_user(db, user_id)
    uploads = [
        (field, prefix, upload)
        for (field, prefix), upload in zip(
            contract_service.ORIGINAL_FIELDS.items(), (contract_file, job_offer_file)
        )
        if upload is not None
    ]
    if not uploads:
        raise HTTPException(status_code=400, detail="Provide contract and/or jobOffer")

    # Validate every file before storing any of them.
    checked = []
    for field, prefix, upload in uploads:
        try:
            content = await read_upload(upload, PDF_ONLY)
        except UploadRejected as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.detail)
        checked.append((field, prefix, upload.filename, content))

    contract = contract_service.get_or_create(db, user.id)
    for field, prefix, filename, content in checked:
        stored = store_file(user.id, "contracts", filename, content)
        contract_service.attach_original(contract, prefix, stored.url)

    db.commit()
    db.refresh(contract)
    envelope = contract_envelope(contract)

    for field, _, _, _ in checked:
        audit_service.record(db, "UPLOAD", "contract", entity_id=contract.id, user_id=user.id,
                             admin_email=admin["subject"], description=f"Original {field} uploaded")
    return envelope
