from fastapi import APIRouter, Depends

from chefportal.dependencies import current_candidate
from chefportal.models.user import User
from chefportal.responses import work_permit_to_response
from chefportal.schemas.work_permit import WorkPermitEnvelope

router = APIRouter(prefix="/workpermit", tags=["workpermit"])


@router.get("", response_model=WorkPermitEnvelope)
async def get_work_permit(user: User = Depends(current_candidate)):
    permit = user.work_permit
    return WorkPermitEnvelope(work_permit=work_permit_to_response(permit) if permit else None)
