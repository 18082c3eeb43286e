from chefportal.models.contract import Contract
from chefportal.models.docket import Docket
from chefportal.models.user import User
from chefportal.models.work_permit import WorkPermit
from chefportal.schemas.base import StatusResponse
from chefportal.schemas.contract import ContractEnvelope, ContractResponse
from chefportal.schemas.docket import ChecklistEntry, DocketEnvelope, DocketResponse, ProgressResponse
from chefportal.schemas.user import UserResponse
from chefportal.schemas.work_permit import WorkPermitResponse
from chefportal.services.docket_progress import (
    CANDIDATE_CHECKLIST,
    ChecklistItem,
    DocketProgress,
    calculate_progress,
    can_submit,
    checklist_status,
)
from chefportal.services.status_labels import (
    StatusLabel,
    classify_contract,
    classify_progress,
    classify_work_permit,
)
from chefportal.services.work_permit_service import can_upload_final_docket, needs_tracking_code


def status_to_response(label: StatusLabel) -> StatusResponse:
    return StatusResponse(label=label.label, color=label.color)


def user_to_response(user: User) -> UserResponse:
    return UserResponse.model_validate(user)


def docket_to_response(docket: Docket | None) -> DocketResponse | None:
    if docket is None:
        return None
    return DocketResponse.model_validate(docket)


def progress_to_response(progress: DocketProgress) -> ProgressResponse:
    return ProgressResponse(
        completed=progress.completed,
        total=progress.total,
        percentage=progress.percentage,
        status=status_to_response(classify_progress(progress.percentage)),
    )


def docket_envelope(
    docket: Docket | None,
    checklist: tuple[ChecklistItem, ...] = CANDIDATE_CHECKLIST,
) -> DocketEnvelope:
    progress = calculate_progress(docket, checklist)
    return DocketEnvelope(
        docket=docket_to_response(docket),
        progress=progress_to_response(progress),
        checklist=[ChecklistEntry(**row) for row in checklist_status(docket, checklist)],
        can_submit=can_submit(progress),
    )


def contract_to_response(contract: Contract | None) -> ContractResponse | None:
    if contract is None:
        return None
    return ContractResponse.model_validate(contract)


def contract_envelope(contract: Contract | None) -> ContractEnvelope:
    return ContractEnvelope(
        contract=contract_to_response(contract),
        status=status_to_response(classify_contract(contract)),
    )


def work_permit_to_response(permit: WorkPermit) -> WorkPermitResponse:
    return WorkPermitResponse(
        id=permit.id,
        user_id=permit.user_id,
        status=permit.status,
        tracking_code=permit.tracking_code,
        application_date=permit.application_date,
        final_docket_url=permit.final_docket_url,
        notes=permit.notes,
        created_at=permit.created_at,
        last_updated=permit.last_updated,
        can_upload_final_docket=can_upload_final_docket(permit.status),
        tracking_code_required=needs_tracking_code(permit.status, permit.tracking_code),
        display=status_to_response(classify_work_permit(permit)),
    )
