from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from chefportal.database import get_db
from chefportal.models.user import User
from chefportal.services.auth_service import auth_service
from chefportal.services.user_service import UserNotFound, get_user


def _bearer(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")
    return authorization[7:]


async def require_session(authorization: str | None = Header(None)) -> dict:
    token = _bearer(authorization)
    session = auth_service.validate(token)
    if session is None:
        raise HTTPException(status_code=401, detail="Session expired or invalid")
    return {**session, "token": token}


async def require_admin(authorization: str | None = Header(None)) -> dict:
    session = await require_session(authorization)
    if session["role"] != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return session


async def require_candidate(authorization: str | None = Header(None)) -> dict:
    session = await require_session(authorization)
    if session["role"] != "candidate":
        raise HTTPException(status_code=403, detail="Candidate access required")
    return session


async def current_candidate(
    session: dict = Depends(require_candidate),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == session["subject"]).first()
    if user is None:
        auth_service.logout(session["token"])
        raise HTTPException(status_code=401, detail="Account no longer exists")
    if user.archived:
        raise HTTPException(status_code=403, detail="Account is archived")
    return user


def load_user(db: Session, user_id: str) -> User:
    try:
        return get_user(db, user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
