import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.database import get_db
from chefportal.dependencies import current_candidate, require_candidate
from chefportal.models.user import User
from chefportal.responses import user_to_response
from chefportal.schemas.auth import CandidateLoginResponse, SendOtpRequest, VerifyOtpRequest
from chefportal.schemas.user import ProfileUpdate, UserResponse
from chefportal.services import audit_service, notifier
from chefportal.services.auth_service import OtpError, OtpThrottled, auth_service
from chefportal.services.user_service import create_user, find_by_email
from chefportal.utils.timestamps import now_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["candidate-auth"])


@router.post("/auth/send-otp")
async def send_otp(req: SendOtpRequest, db: Session = Depends(get_db)):
    user = find_by_email(db, req.email)
    if user is not None and user.archived:
        raise HTTPException(status_code=403, detail="Account is archived")
    code = auth_service.issue_otp(db, req.email)
    notifier.send_otp(req.email, code, settings.otp_ttl_seconds)
    return {"message": "OTP sent", "expires_in_seconds": settings.otp_ttl_seconds}


@router.post("/auth/verify-otp", response_model=CandidateLoginResponse)
async def verify_otp(req: VerifyOtpRequest, db: Session = Depends(get_db)):
    user = find_by_email(db, req.email)
    if user is not None and user.archived:
        raise HTTPException(status_code=403, detail="Account is archived")

    try:
        auth_service.verify_otp(db, req.email, req.otp)
    except OtpThrottled as exc:
        raise HTTPException(
            status_code=429,
            detail={"error": "too_many_attempts", "retry_after_seconds": exc.retry_after_seconds},
        )
    except OtpError as exc:
        audit_service.record(db, "LOGIN_FAILED", "user", user_id=user.id if user else None,
                             severity="warning", description=f"OTP login failed for {req.email}: {exc}")
        raise HTTPException(status_code=401, detail=str(exc))

    # First successful login registers the candidate.
    if user is None:
        user = create_user(db, req.email)
        logger.info("Registered candidate %s", user.email)
        audit_service.record(db, "CREATE", "user", entity_id=user.id, user_id=user.id,
                             description=f"Candidate self-registered: {user.email}")

    session = auth_service.candidate_session(user.id)
    audit_service.record(db, "LOGIN", "user", entity_id=user.id, user_id=user.id)
    return CandidateLoginResponse(**session, user=user_to_response(user))


@router.get("/auth/me", response_model=UserResponse)
async def me(user: User = Depends(current_candidate)):
    return user_to_response(user)


@router.post("/auth/logout")
async def logout(session: dict = Depends(require_candidate), db: Session = Depends(get_db)):
    auth_service.logout(session["token"])
    audit_service.record(db, "LOGOUT", "user", entity_id=session["subject"], user_id=session["subject"])
    return {"message": "Logged out"}


@router.get("/profile", response_model=UserResponse)
async def get_profile(user: User = Depends(current_candidate)):
    return user_to_response(user)


@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    req: ProfileUpdate,
    user: User = Depends(current_candidate),
    db: Session = Depends(get_db),
):
    updates = req.model_dump(exclude_unset=True)
    for key, value in updates.items():
        setattr(user, key, value.strip() if isinstance(value, str) else value)
    user.updated_at = now_iso()
    db.commit()
    db.refresh(user)
    audit_service.record(db, "UPDATE", "user", entity_id=user.id, user_id=user.id,
                         details={"fields": sorted(updates)})
    return user_to_response(user)
