from pydantic import EmailStr

from chefportal.schemas.base import CamelModel, StatusResponse
from chefportal.schemas.user import UserResponse


class FileEntry(CamelModel):
    name: str
    url: str
    size: int


class Reference(CamelModel):
    full_name: str
    company: str
    designation: str
    phone: str
    email: EmailStr


class DocketResponse(CamelModel):
    id: str
    user_id: str
    passport_front_url: str | None
    passport_last_url: str | None
    passport_visa_urls: list[str] = []
    passport_photo_url: str | None
    resume_url: str | None
    education_files: list[FileEntry] = []
    experience_files: list[FileEntry] = []
    offer_letter_url: str | None
    permanent_address_url: str | None
    current_address_url: str | None
    other_certifications: list[FileEntry] = []
    references: list[Reference] = []
    last_updated: str


class DocketUpdate(CamelModel):
    """Fields a candidate may edit directly; documents arrive through uploads."""

    references: list[Reference] | None = None


class ProgressResponse(CamelModel):
    completed: int
    total: int
    percentage: float
    status: StatusResponse


class ChecklistEntry(CamelModel):
    key: str
    label: str
    completed: bool


class DocketEnvelope(CamelModel):
    docket: DocketResponse | None
    progress: ProgressResponse
    checklist: list[ChecklistEntry]
    can_submit: bool


class DocketUploadResponse(DocketEnvelope):
    field: str
    url: str


class AdminDocketRow(CamelModel):
    user: UserResponse
    docket: DocketResponse | None
    progress: ProgressResponse


class AdminDocketListResponse(CamelModel):
    dockets: list[AdminDocketRow]
    total: int
    completed: int
    in_progress: int
    not_started: int
