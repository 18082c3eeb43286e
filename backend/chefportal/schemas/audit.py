from typing import Any

from pydantic import Field

from chefportal.schemas.base import CamelModel


class AuditEntry(CamelModel):
    id: str
    action: str
    entity_type: str
    entity_id: str | None
    user_id: str | None
    admin_email: str | None
    description: str | None
    severity: str
    details: dict[str, Any] | None = Field(None, serialization_alias="metadata")
    created_at: str


class AuditListResponse(CamelModel):
    entries: list[AuditEntry]
    total: int
    page: int
    per_page: int


class AuditStatsResponse(CamelModel):
    days: int
    total: int
    by_action: dict[str, int]
    by_severity: dict[str, int]
