from chefportal.schemas.base import CamelModel


class AdminStatsResponse(CamelModel):
    total_users: int
    active_users: int
    archived_users: int
    completed_dockets: int
    pending_dockets: int
    contracts_pending: int
    contracts_completed: int
    work_permits_by_status: dict[str, int]
    issues: int
