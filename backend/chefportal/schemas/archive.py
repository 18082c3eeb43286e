from pydantic import Field

from chefportal.schemas.base import CamelModel
from chefportal.schemas.user import UserResponse


class ArchiveRequest(CamelModel):
    reason: str = Field(..., max_length=500)


class ArchiveRunResponse(CamelModel):
    archived_count: int
    errors: list[str]
    summary: str


class ArchiveStatsResponse(CamelModel):
    total_users: int
    active_users: int
    archived_users: int
    users_eligible_for_archive: int
    oldest_user_age_days: int


class ArchiveActionResponse(CamelModel):
    message: str
    user: UserResponse
