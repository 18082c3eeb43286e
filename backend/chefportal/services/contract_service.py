import uuid

from sqlalchemy.orm import Session

from chefportal.models.contract import Contract
from chefportal.services.signature_service import SignatureCheck
from chefportal.utils.timestamps import now_iso

SUB_DOCUMENT_STATUSES = {"not-started", "pending", "signed", "rejected"}

# multipart field -> column prefix
ORIGINAL_FIELDS = {"contract": "company_contract", "jobOffer": "job_offer"}
SIGNED_FIELDS = {"signedContract": "company_contract", "signedJobOffer": "job_offer"}


def new_contract(user_id: str, now: str | None = None) -> Contract:
    now = now or now_iso()
    return Contract(
        id=str(uuid.uuid4()),
        user_id=user_id,
        company_contract_status="not-started",
        job_offer_status="not-started",
        created_at=now,
        last_updated=now,
    )


def get_or_create(db: Session, user_id: str) -> Contract:
    contract = db.query(Contract).filter(Contract.user_id == user_id).first()
    if contract is None:
        contract = new_contract(user_id)
        db.add(contract)
        db.flush()
    return contract


def attach_original(contract: Contract, prefix: str, url: str) -> None:
    """A new original restarts the signing cycle for that sub-document."""
    setattr(contract, f"{prefix}_original_url", url)
    setattr(contract, f"{prefix}_signed_url", None)
    setattr(contract, f"{prefix}_signature_valid", None)
    setattr(contract, f"{prefix}_status", "pending")
    contract.last_updated = now_iso()


def attach_signed(contract: Contract, prefix: str, url: str, check: SignatureCheck) -> str:
    setattr(contract, f"{prefix}_signed_url", url)
    setattr(contract, f"{prefix}_signature_valid", check.is_valid)
    status = "signed" if check.is_valid else "rejected"
    setattr(contract, f"{prefix}_status", status)
    contract.last_updated = now_iso()
    return status


def is_pending_review(contract: Contract) -> bool:
    return (
        (contract.company_contract_status == "pending" and bool(contract.company_contract_original_url))
        or (contract.job_offer_status == "pending" and bool(contract.job_offer_original_url))
    )
