from chefportal.schemas.base import CamelModel, StatusResponse


class WorkPermitResponse(CamelModel):
    id: str
    user_id: str
    status: str
    tracking_code: str | None
    application_date: str | None
    final_docket_url: str | None
    notes: str | None
    created_at: str
    last_updated: str
    can_upload_final_docket: bool
    tracking_code_required: bool
    display: StatusResponse


class WorkPermitUpdate(CamelModel):
    status: str | None = None
    tracking_code: str | None = None
    notes: str | None = None


class WorkPermitUpdateResponse(CamelModel):
    work_permit: WorkPermitResponse
    warnings: list[str] = []


class WorkPermitEnvelope(CamelModel):
    work_permit: WorkPermitResponse | None


class AdminWorkPermitRow(CamelModel):
    user_id: str
    email: str | None
    display_name: str | None
    work_permit: WorkPermitResponse
