import uuid

from sqlalchemy.orm import Session

from chefportal.models.user import User
from chefportal.services import contract_service, docket_service, work_permit_service
from chefportal.utils.security import generate_uid
from chefportal.utils.timestamps import now_iso


class UserNotFound(LookupError):
    pass


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UserNotFound(f"User {user_id} not found")
    return user


def _unique_uid(db: Session) -> str:
    while True:
        uid = generate_uid()
        if not db.query(User.id).filter(User.uid == uid).first():
            return uid


def create_user(db: Session, email: str, created_at: str | None = None, **fields) -> User:
    """Create a candidate with an empty docket, contract and work permit."""
    now = now_iso()
    user = User(
        id=str(uuid.uuid4()),
        email=email.strip().lower(),
        uid=_unique_uid(db),
        docket_completed=False,
        archived=False,
        created_at=created_at or now,
        updated_at=now,
        **fields,
    )
    db.add(user)
    db.flush()
    db.add(docket_service.new_docket(user.id, now))
    db.add(contract_service.new_contract(user.id, now))
    db.add(work_permit_service.new_work_permit(user.id, now))
    db.commit()
    db.refresh(user)
    return user


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()
