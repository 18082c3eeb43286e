import logging
import shutil

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy import or_
from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.database import get_db
from chefportal.dependencies import load_user, require_admin
from chefportal.models.user import User
from chefportal.responses import user_to_response
from chefportal.schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate
from chefportal.services import audit_service
from chefportal.services.auth_service import auth_service
from chefportal.services.export_service import export_users_csv
from chefportal.services.user_service import create_user, find_by_email
from chefportal.utils.timestamps import now_iso

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-users"])


@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: str | None = None,
    archived: bool | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    _admin: dict = Depends(require_admin),
):
    query = db.query(User)
    if archived is not None:
        query = query.filter(User.archived.is_(archived))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            User.email.ilike(pattern),
            User.display_name.ilike(pattern),
            User.phone.ilike(pattern),
            User.uid.ilike(pattern),
        ))
    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return UserListResponse(
        users=[user_to_response(u) for u in users], total=total, page=page, per_page=per_page,
    )


@router.post("/users", response_model=UserResponse, status_code=201)
async def add_user(req: UserCreate, db: Session = Depends(get_db), admin: dict = Depends(require_admin)):
    if find_by_email(db, req.email):
        raise HTTPException(status_code=409, detail="A user with this email already exists")
    user = create_user(db, req.email, **req.model_dump(exclude={"email"}, exclude_none=True))
    logger.info("Admin %s created user %s", admin["subject"], user.email)
    audit_service.record(db, "CREATE", "user", entity_id=user.id, user_id=user.id,
                         admin_email=admin["subject"])
    return user_to_response(user)


@router.get("/user/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: Session = Depends(get_db), _admin: dict = Depends(require_admin)):
    return user_to_response(load_user(db, user_id))


@router.put("/user/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    req: UserUpdate,
    db: Session = Depends(get_db),
    admin: dict = Depends(require_admin),
):
    user = load_user(db, user_id)
    updates = req.model_dump(exclude_unset=True)
    if updates.get("email"):
        email = updates["email"].strip().lower()
        existing = find_by_email(db, email)
        if existing and existing.id != user.id:
            raise HTTPException(status_code=409, detail="A user with this email already exists")
        updates["email"] = email
    elif "email" in updates:
        del updates["email"]

    for key, value in updates.items():
        setattr(user, key, value)
    user.updated_at = now_iso()
    db.commit()
    db.refresh(user)
    audit_service.record(db, "UPDATE", "user", entity_id=user.id, user_id=user.id,
                         admin_email=admin["subject"], details={"fields": sorted(updates)})
    return user_to_response(user)


@router.delete("/user/{user_id}")
async def delete_user(user_id: str, db: Session = Depends(get_db), admin: dict = Depends(require_admin)):
    user = load_user(db, user_id)
    email = user.email
    db.delete(user)
    db.commit()

    auth_service.logout_subject(user_id)
    shutil.rmtree(settings.users_dir / user_id, ignore_errors=True)
    logger.info("Admin %s deleted user %s", admin["subject"], email)
    audit_service.record(db, "DELETE", "user", entity_id=user_id, admin_email=admin["subject"],
                         severity="warning", description=f"Deleted user {email}")
    return {"message": "User deleted"}


@router.get("/export-csv")
async def export_csv(db: Session = Depends(get_db), admin: dict = Depends(require_admin)):
    csv_data = export_users_csv(db)
    audit_service.record(db, "DOWNLOAD", "export", admin_email=admin["subject"],
                         description="Exported users CSV")
    return Response(
        content=csv_data,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="candidates_export.csv"'},
    )
