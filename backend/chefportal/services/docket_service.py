import uuid

from sqlalchemy.orm import Session

from chefportal.models.docket import Docket
from chefportal.services.file_service import StoredFile
from chefportal.utils.timestamps import now_iso

# documentType -> (column, kind). "single" replaces a URL, "files" appends
# a {name, url, size} entry, "urls" appends a bare URL.
DOCUMENT_TYPES: dict[str, tuple[str, str]] = {
    "passportFront": ("passport_front_url", "single"),
    "passportLast": ("passport_last_url", "single"),
    "passportVisa": ("passport_visa_urls", "urls"),
    "passportPhoto": ("passport_photo_url", "single"),
    "resume": ("resume_url", "single"),
    "education": ("education_files", "files"),
    "experience": ("experience_files", "files"),
    "offerLetter": ("offer_letter_url", "single"),
    "permanentAddress": ("permanent_address_url", "single"),
    "currentAddress": ("current_address_url", "single"),
    "otherCertification": ("other_certifications", "files"),
}

LIST_COLUMNS = {"passport_visa_urls", "education_files", "experience_files", "other_certifications", "references"}


def new_docket(user_id: str, now: str | None = None) -> Docket:
    return Docket(
        id=str(uuid.uuid4()),
        user_id=user_id,
        passport_visa_urls=[],
        education_files=[],
        experience_files=[],
        other_certifications=[],
        references=[],
        last_updated=now or now_iso(),
    )


def get_or_create(db: Session, user_id: str) -> Docket:
    docket = db.query(Docket).filter(Docket.user_id == user_id).first()
    if docket is None:
        docket = new_docket(user_id)
        db.add(docket)
        db.flush()
    return docket


def attach_document(docket: Docket, document_type: str, stored: StoredFile) -> str:
    """Record one uploaded document on the docket. Returns the column touched."""
    column, kind = DOCUMENT_TYPES[document_type]
    if kind == "single":
        setattr(docket, column, stored.url)
    elif kind == "files":
        # Reassign so the JSON column is flagged dirty.
        setattr(docket, column, [*(getattr(docket, column) or []), stored.as_entry()])
    else:
        setattr(docket, column, [*(getattr(docket, column) or []), stored.url])
    docket.last_updated = now_iso()
    return column


def apply_patch(docket: Docket, updates: dict) -> None:
    """Apply a partial update. List columns are only replaced by lists."""
    for key, value in updates.items():
        if key in LIST_COLUMNS:
            if isinstance(value, list):
                setattr(docket, key, value)
            continue
        setattr(docket, key, value)
    docket.last_updated = now_iso()
