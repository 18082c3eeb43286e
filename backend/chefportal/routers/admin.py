from collections import Counter

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import require_admin
from chefportal.models.user import User
from chefportal.schemas.auth import (
    AdminLoginRequest,
    AdminMeResponse,
    AdminSetupRequest,
    SessionResponse,
    ThrottleResponse,
)
from chefportal.schemas.stats import AdminStatsResponse
from chefportal.services import audit_service, contract_service
from chefportal.services.auth_service import auth_service
from chefportal.services.docket_progress import admin_checklist, calculate_progress
from chefportal.services.status_labels import CONTRACT_COMPLETED, classify_contract

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/setup")
async def admin_setup(req: AdminSetupRequest, db: Session = Depends(get_db)):
    if auth_service.admin_initialized(db):
        raise HTTPException(status_code=409, detail="Admin already configured")
    if len(req.password) < 8:
        raise HTTPException(status_code=400, detail="Password must be at least 8 characters")
    auth_service.setup_admin(db, req.email, req.password)
    audit_service.record(db, "CREATE", "admin", admin_email=req.email.lower(),
                         description="Admin account configured")
    return {"message": "Admin configured"}


@router.post("/login", response_model=SessionResponse | ThrottleResponse)
async def admin_login(req: AdminLoginRequest, db: Session = Depends(get_db)):
    if not auth_service.admin_initialized(db):
        raise HTTPException(status_code=404, detail="Admin not configured")

    result = auth_service.admin_login(db, req.email, req.password)
    if result is None:
        audit_service.record(db, "LOGIN_FAILED", "admin", admin_email=req.email.lower(), severity="warning")
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if "error" in result:
        raise HTTPException(status_code=429, detail=result)
    audit_service.record(db, "LOGIN", "admin", admin_email=req.email.lower())
    return SessionResponse(**result)


@router.post("/logout")
async def admin_logout(session: dict = Depends(require_admin), db: Session = Depends(get_db)):
    auth_service.logout(session["token"])
    audit_service.record(db, "LOGOUT", "admin", admin_email=session["subject"])
    return {"message": "Logged out"}


@router.get("/me", response_model=AdminMeResponse)
async def admin_me(session: dict = Depends(require_admin)):
    return AdminMeResponse(email=session["subject"])


@router.get("/stats", response_model=AdminStatsResponse, dependencies=[Depends(require_admin)])
async def admin_stats(db: Session = Depends(get_db)):
    users = db.query(User).all()
    active = [u for u in users if not u.archived]
    checklist = admin_checklist()

    completed_dockets = sum(
        1 for u in active if calculate_progress(u.docket, checklist).percentage >= 100
    )
    contract_labels = Counter(classify_contract(u.contract).label for u in active)
    permits_by_status = Counter(u.work_permit.status for u in active if u.work_permit)
    pending_review = sum(1 for u in active if u.contract and contract_service.is_pending_review(u.contract))

    return AdminStatsResponse(
        total_users=len(users),
        active_users=len(active),
        archived_users=len(users) - len(active),
        completed_dockets=completed_dockets,
        pending_dockets=len(active) - completed_dockets,
        contracts_pending=pending_review,
        contracts_completed=contract_labels.get(CONTRACT_COMPLETED.label, 0),
        work_permits_by_status=dict(permits_by_status),
        issues=sum(1 for u in active if u.work_permit is None or u.docket is None or u.contract is None),
    )
