from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.dependencies import require_admin
from chefportal.models.user import User
from chefportal.responses import user_to_response
from chefportal.schemas.archive import (
    ArchiveActionResponse,
    ArchiveRequest,
    ArchiveRunResponse,
    ArchiveStatsResponse,
)
from chefportal.schemas.user import UserResponse
from chefportal.services.archive_service import ArchiveStateError, archive_service, eligible_users
from chefportal.services.auth_service import auth_service
from chefportal.services.user_service import UserNotFound

router = APIRouter(prefix="/admin/archive", tags=["admin-archive"])


@router.get("/stats", response_model=ArchiveStatsResponse, dependencies=[Depends(require_admin)])
async def archive_stats(db: Session = Depends(get_db)):
    return ArchiveStatsResponse(**archive_service.stats(db))


@router.get("/users", response_model=list[UserResponse], dependencies=[Depends(require_admin)])
async def archived_users(db: Session = Depends(get_db)):
    users = db.query(User).filter(User.archived.is_(True)).order_by(User.archived_at.desc()).all()
    return [user_to_response(u) for u in users]


@router.get("/eligible", response_model=list[UserResponse], dependencies=[Depends(require_admin)])
async def archive_eligible(db: Session = Depends(get_db)):
    return [user_to_response(u) for u in eligible_users(db)]


@router.post("/run", response_model=ArchiveRunResponse, dependencies=[Depends(require_admin)])
async def run_archive(db: Session = Depends(get_db)):
    return ArchiveRunResponse(**archive_service.run_auto_archive(db))


@router.post("/user/{user_id}", response_model=ArchiveActionResponse)
async def archive_user(
    user_id: str,
    req: ArchiveRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    reason = req.reason.strip()
    if not reason:
        raise HTTPException(status_code=400, detail="Archive reason is required")
    try:
        user = archive_service.archive_user(db, user_id, reason, admin_email=admin["subject"])
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except ArchiveStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    auth_service.logout_subject(user.id)
    return ArchiveActionResponse(message="User archived", user=user_to_response(user))


@router.post("/restore/{user_id}", response_model=ArchiveActionResponse)
async def restore_user(user_id: str, db: Session = Depends(get_db), admin: dict = Depends(require_admin)):
    try:
        user = archive_service.restore_user(db, user_id, admin_email=admin["subject"])
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except ArchiveStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return ArchiveActionResponse(message="User restored", user=user_to_response(user))
