"""
Data consistency pass over every candidate.

Missing per-user records are created, out-of-range status values are reset,
and anything that needs a human is reported without being touched.
"""
import logging
import threading
import time

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.models.contract import Contract
from chefportal.models.docket import Docket
from chefportal.models.user import User
from chefportal.models.work_permit import WorkPermit
from chefportal.services import audit_service, contract_service, docket_service, work_permit_service
from chefportal.services.contract_service import SUB_DOCUMENT_STATUSES
from chefportal.services.work_permit_service import VALID_STATUSES, needs_tracking_code
from chefportal.utils.timestamps import now_iso

logger = logging.getLogger(__name__)


class SyncService:
    def __init__(self):
        self._lock = threading.Lock()
        self._last_report: dict | None = None

    def status(self) -> dict:
        return {
            "is_running": self._lock.locked(),
            "scheduled": settings.scheduler_enabled,
            "interval_seconds": settings.sync_interval_seconds,
            "last_report": self._last_report,
        }

    def run(self, db: Session) -> dict:
        report = {
            "timestamp": now_iso(),
            "users_checked": 0,
            "inconsistencies": [],
            "total_inconsistencies": 0,
            "busy": False,
        }
        if not self._lock.acquire(blocking=False):
            logger.warning("Sync requested while a sync is already running")
            report["busy"] = True
            return report

        started = time.monotonic()
        try:
            users = db.query(User).order_by(User.created_at.desc()).all()
            report["users_checked"] = len(users)
            for user in users:
                for check in (self._check_docket, self._check_work_permit, self._check_contract):
                    try:
                        check(db, user, report)
                    except SQLAlchemyError as exc:
                        db.rollback()
                        self._add(report, user, check.__name__.removeprefix("_check_"),
                                  f"Error during check: {exc}", False)
            db.commit()
        finally:
            self._lock.release()

        elapsed_ms = int((time.monotonic() - started) * 1000)
        if report["total_inconsistencies"] == 0:
            logger.info("Sync complete: all %d users consistent (%d ms)", report["users_checked"], elapsed_ms)
        else:
            logger.warning("Sync complete: %d inconsistencies across %d users (%d ms)",
                           report["total_inconsistencies"], report["users_checked"], elapsed_ms)
        self._last_report = report
        audit_service.record(db, "SYNC_COMPLETE", "system", details={
            "users_checked": report["users_checked"],
            "total_inconsistencies": report["total_inconsistencies"],
        })
        return report

    def _check_docket(self, db: Session, user: User, report: dict) -> None:
        docket = db.query(Docket).filter(Docket.user_id == user.id).first()
        if docket is None:
            db.add(docket_service.new_docket(user.id))
            self._add(report, user, "docket", "Missing docket record - created automatically", True)
            return
        if not docket.passport_front_url and not docket.passport_last_url:
            self._add(report, user, "docket", "No passport documents uploaded yet", False)

    def _check_work_permit(self, db: Session, user: User, report: dict) -> None:
        permit = db.query(WorkPermit).filter(WorkPermit.user_id == user.id).first()
        if permit is None:
            db.add(work_permit_service.new_work_permit(user.id))
            self._add(report, user, "workpermit", "Missing work permit record - created automatically", True)
            return
        if permit.status not in VALID_STATUSES:
            bad = permit.status
            permit.status = "preparation"
            permit.last_updated = now_iso()
            self._add(report, user, "workpermit", f'Invalid status "{bad}" - reset to preparation', True)
        if needs_tracking_code(permit.status, permit.tracking_code):
            self._add(report, user, "workpermit", f'Status "{permit.status}" without a tracking code', False)

    def _check_contract(self, db: Session, user: User, report: dict) -> None:
        contract = db.query(Contract).filter(Contract.user_id == user.id).first()
        if contract is None:
            db.add(contract_service.new_contract(user.id))
            self._add(report, user, "contract", "Missing contract record - created automatically", True)
            return
        for prefix in ("company_contract", "job_offer"):
            value = getattr(contract, f"{prefix}_status")
            if value not in SUB_DOCUMENT_STATUSES:
                setattr(contract, f"{prefix}_status", "pending")
                contract.last_updated = now_iso()
                self._add(report, user, "contract", f'Invalid {prefix} status "{value}" - reset to pending', True)

    @staticmethod
    def _add(report: dict, user: User, kind: str, issue: str, fixed: bool) -> None:
        report["inconsistencies"].append({
            "user_id": user.id,
            "user_email": user.email,
            "type": kind,
            "issue": issue,
            "fixed": fixed,
        })
        report["total_inconsistencies"] += 1


sync_service = SyncService()
