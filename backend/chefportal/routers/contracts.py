from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import current_candidate
from chefportal.models.user import User
from chefportal.responses import contract_envelope
from chefportal.schemas.contract import ContractEnvelope, SignatureResult, SignedUploadResponse
from chefportal.services import audit_service, contract_service
from chefportal.services.file_service import PDF_ONLY, UploadRejected, read_upload, store_file
from chefportal.services.signature_service import SignatureValidationError, validate_pdf_signature

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.get("", response_model=ContractEnvelope)
async def get_contract(user: User = Depends(current_candidate)):
    return contract_envelope(user.contract)


@router.post("/upload-signed", response_model=SignedUploadResponse)
async def upload_signed(
    signed_contract: UploadFile | None = File(None, alias="signedContract"),
    signed_job_offer: UploadFile | None = File(None, alias="signedJobOffer"),
    user: User = Depends(current_candidate),
    db: Session = Depends(get_db),
):
    uploads = [
        (field, prefix, upload)
        for (field, prefix), upload in zip(
            contract_service.SIGNED_FIELDS.items(), (signed_contract, signed_job_offer)
        )
        if upload is not None
    ]
    if not uploads:
        raise HTTPException(status_code=400, detail="Provide signedContract and/or signedJobOffer")

    contract = contract_service.get_or_create(db, user.id)

    # Validate every file before storing any of them.
    checked = []
    for field, prefix, upload in uploads:
        if not getattr(contract, f"{prefix}_original_url"):
            raise HTTPException(status_code=409, detail=f"No original document to sign for {field}")
        try:
            content = await read_upload(upload, PDF_ONLY)
            check = validate_pdf_signature(content)
        except UploadRejected as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.detail)
        except SignatureValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        checked.append((field, prefix, upload.filename, content, check))

    results = []
    attached = []
    for field, prefix, filename, content, check in checked:
        stored = store_file(user.id, "contracts", filename, content)
        status = contract_service.attach_signed(contract, prefix, stored.url, check)
        attached.append((field, status, check))
        results.append(SignatureResult(
            document=field, valid=check.is_valid, confidence=check.confidence, keywords=check.keywords,
        ))

    db.commit()
    db.refresh(contract)
    envelope = contract_envelope(contract)

    for field, status, check in attached:
        audit_service.record(
            db, "UPLOAD", "contract", entity_id=contract.id, user_id=user.id,
            severity="info" if check.is_valid else "warning",
            description=f"Signed {field} uploaded: {status}",
            details={"confidence": check.confidence, "keywords": check.keywords},
        )
    return SignedUploadResponse(contract=envelope.contract, status=envelope.status, signatures=results)
