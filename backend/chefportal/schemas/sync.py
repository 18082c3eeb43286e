from chefportal.schemas.base import CamelModel


class Inconsistency(CamelModel):
    user_id: str
    user_email: str | None
    type: str
    issue: str
    fixed: bool


class SyncReport(CamelModel):
    timestamp: str
    users_checked: int
    inconsistencies: list[Inconsistency]
    total_inconsistencies: int
    busy: bool = False


class SyncStatusResponse(CamelModel):
    is_running: bool
    scheduled: bool
    interval_seconds: int
    last_report: SyncReport | None


class ReminderRunResponse(CamelModel):
    checked: int
    sent: int
    skipped: int
    failed: int
