import csv
import io

from sqlalchemy.orm import Session

from chefportal.models.user import User
from chefportal.services.docket_progress import admin_checklist, calculate_progress
from chefportal.services.status_labels import classify_contract, classify_progress, classify_work_permit

CSV_COLUMNS = [
    "user_id", "uid", "email", "display_name", "phone", "created_at",
    "docket_completed_items", "docket_total_items", "docket_percentage", "docket_status",
    "contract_status", "work_permit_status", "tracking_code",
    "archived", "archived_at", "archived_reason",
]


def export_users_csv(db: Session) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_COLUMNS)

    checklist = admin_checklist()
    for user in db.query(User).order_by(User.created_at.desc()).all():
        progress = calculate_progress(user.docket, checklist)
        permit = user.work_permit
        writer.writerow([
            user.id, user.uid, user.email, user.display_name, user.phone, user.created_at,
            progress.completed, progress.total, f"{progress.percentage:.1f}",
            classify_progress(progress.percentage).label,
            classify_contract(user.contract).label,
            classify_work_permit(permit).label,
            permit.tracking_code if permit else None,
            "yes" if user.archived else "no", user.archived_at, user.archived_reason,
        ])
    return output.getvalue()
