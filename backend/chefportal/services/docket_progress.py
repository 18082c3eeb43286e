"""
Docket completion rules.

A docket is a sparse record of uploaded documents. Completion is a fixed
checklist of nine predicates evaluated independently; the percentage is
never rounded here, callers round for display.
"""
from dataclasses import dataclass
from typing import Any, Callable

from chefportal.config import settings

# A candidate may submit once this many checklist items are done.
MIN_ITEMS_TO_SUBMIT = 6


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _field(docket: Any, name: str) -> Any:
    if isinstance(docket, dict):
        if name in docket:
            return docket[name]
        return docket.get(_camel(name))
    return getattr(docket, name, None)


def _present(name: str) -> Callable[[Any], bool]:
    return lambda d: bool(_field(d, name))


def _at_least(name: str, n: int) -> Callable[[Any], bool]:
    return lambda d: len(_field(d, name) or []) >= n


@dataclass(frozen=True)
class ChecklistItem:
    key: str
    label: str
    check: Callable[[Any], bool]


@dataclass(frozen=True)
class DocketProgress:
    completed: int
    total: int
    percentage: float


CANDIDATE_CHECKLIST: tuple[ChecklistItem, ...] = (
    ChecklistItem("passportFrontUrl", "Passport front page", _present("passport_front_url")),
    ChecklistItem("passportPhotoUrl", "Passport photo", _present("passport_photo_url")),
    ChecklistItem("resumeUrl", "Resume", _present("resume_url")),
    ChecklistItem("educationFiles", "Education certificates", _at_least("education_files", 1)),
    ChecklistItem("experienceFiles", "Experience letters", _at_least("experience_files", 1)),
    ChecklistItem("offerLetterUrl", "Offer letter", _present("offer_letter_url")),
    ChecklistItem("permanentAddressUrl", "Permanent address proof", _present("permanent_address_url")),
    ChecklistItem("otherCertifications", "Other certifications", _at_least("other_certifications", 1)),
    ChecklistItem("references", "Two references", _at_least("references", 2)),
)

# Variant used by the old admin docket list: passport last page instead of
# other certifications. Selectable through PORTAL_ADMIN_CHECKLIST.
LEGACY_ADMIN_CHECKLIST: tuple[ChecklistItem, ...] = (
    CANDIDATE_CHECKLIST[0],
    ChecklistItem("passportLastUrl", "Passport last page", _present("passport_last_url")),
    *CANDIDATE_CHECKLIST[1:7],
    CANDIDATE_CHECKLIST[8],
)

CHECKLISTS = {
    "candidate": CANDIDATE_CHECKLIST,
    "legacy_admin": LEGACY_ADMIN_CHECKLIST,
}


def admin_checklist() -> tuple[ChecklistItem, ...]:
    return CHECKLISTS.get(settings.admin_checklist, CANDIDATE_CHECKLIST)


def calculate_progress(docket: Any, checklist: tuple[ChecklistItem, ...] = CANDIDATE_CHECKLIST) -> DocketProgress:
    total = len(checklist)
    if docket is None:
        return DocketProgress(completed=0, total=total, percentage=0.0)
    completed = sum(1 for item in checklist if item.check(docket))
    return DocketProgress(completed=completed, total=total, percentage=100.0 * completed / total)


def checklist_status(docket: Any, checklist: tuple[ChecklistItem, ...] = CANDIDATE_CHECKLIST) -> list[dict]:
    return [
        {"key": item.key, "label": item.label, "completed": docket is not None and item.check(docket)}
        for item in checklist
    ]


def missing_items(docket: Any, checklist: tuple[ChecklistItem, ...] = CANDIDATE_CHECKLIST) -> list[str]:
    return [row["label"] for row in checklist_status(docket, checklist) if not row["completed"]]


def can_submit(progress: DocketProgress) -> bool:
    return progress.completed >= MIN_ITEMS_TO_SUBMIT
