from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StatusLabel:
    label: str
    color: str


COMPLETE = StatusLabel("Complete", "green")
NEARLY_DONE = StatusLabel("Nearly Done", "blue")
IN_PROGRESS = StatusLabel("In Progress", "orange")
STARTED = StatusLabel("Started", "yellow")
NOT_STARTED = StatusLabel("Not Started", "gray")

# Checked in order, first match wins. 100 is handled before the table.
PROGRESS_THRESHOLDS: tuple[tuple[float, StatusLabel], ...] = (
    (70.0, NEARLY_DONE),
    (30.0, IN_PROGRESS),
    (0.0, STARTED),
)

DOCKET_FILTERS = {
    "completed": lambda p: p == 100,
    "in-progress": lambda p: 0 < p < 100,
    "not-started": lambda p: p == 0,
    "nearly-done": lambda p: classify_progress(p) == NEARLY_DONE,
}


def classify_progress(percentage: float) -> StatusLabel:
    if percentage >= 100:
        return COMPLETE
    for threshold, label in PROGRESS_THRESHOLDS:
        if percentage > threshold:
            return label
    return NOT_STARTED


def _sub_document_signed(contract: Any, prefix: str) -> bool:
    signed_url = getattr(contract, f"{prefix}_signed_url", None)
    status = getattr(contract, f"{prefix}_status", None)
    return bool(signed_url) and status != "rejected"


def contract_signed_parts(contract: Any) -> tuple[bool, bool]:
    if contract is None:
        return False, False
    return _sub_document_signed(contract, "company_contract"), _sub_document_signed(contract, "job_offer")


CONTRACT_COMPLETED = StatusLabel("Completed", "green")
CONTRACT_IN_PROGRESS = StatusLabel("In Progress", "yellow")
CONTRACT_PENDING = StatusLabel("Pending", "gray")


def classify_contract(contract: Any) -> StatusLabel:
    if contract is None:
        return NOT_STARTED
    company_signed, offer_signed = contract_signed_parts(contract)
    if company_signed and offer_signed:
        return CONTRACT_COMPLETED
    if company_signed or offer_signed:
        return CONTRACT_IN_PROGRESS
    return CONTRACT_PENDING


WORK_PERMIT_LABELS = {
    "preparation": StatusLabel("Preparation", "gray"),
    "applied": StatusLabel("Applied", "blue"),
    "awaiting_decision": StatusLabel("Awaiting Embassy Decision", "yellow"),
    "approved": StatusLabel("Approved", "green"),
    "rejected": StatusLabel("Rejected", "red"),
}


def classify_work_permit(work_permit: Any) -> StatusLabel:
    if work_permit is None:
        return NOT_STARTED
    return WORK_PERMIT_LABELS.get(work_permit.status, WORK_PERMIT_LABELS["preparation"])
