from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import require_admin
from chefportal.schemas.audit import AuditEntry, AuditListResponse, AuditStatsResponse
from chefportal.schemas.sync import ReminderRunResponse, SyncReport, SyncStatusResponse
from chefportal.services import audit_service
from chefportal.services.reminder_service import send_docket_reminders
from chefportal.services.sync_service import sync_service

router = APIRouter(prefix="/admin", tags=["admin-maintenance"], dependencies=[Depends(require_admin)])


@router.get("/sync/status", response_model=SyncStatusResponse)
async def sync_status():
    return SyncStatusResponse(**sync_service.status())


@router.post("/sync/manual", response_model=SyncReport)
async def sync_manual(db: Session = Depends(get_db)):
    return SyncReport(**sync_service.run(db))


@router.post("/reminders/run", response_model=ReminderRunResponse)
async def run_reminders(db: Session = Depends(get_db)):
    return ReminderRunResponse(**send_docket_reminders(db))


@router.get("/audit", response_model=AuditListResponse)
async def list_audit(
    action: str | None = None,
    entity_type: str | None = None,
    user_id: str | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    if action and action not in audit_service.ACTIONS:
        raise HTTPException(status_code=400, detail=f"Unknown action. Must be one of: {sorted(audit_service.ACTIONS)}")
    rows, total = audit_service.list_entries(db, action, entity_type, user_id, page, per_page)
    return AuditListResponse(
        entries=[AuditEntry.model_validate(row) for row in rows],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/audit/stats", response_model=AuditStatsResponse)
async def audit_stats(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    return AuditStatsResponse(**audit_service.stats(db, days))
