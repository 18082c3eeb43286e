from pydantic import EmailStr, Field

from chefportal.schemas.base import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class UserUpdate(CamelModel):
    email: EmailStr | None = None
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None


class ProfileUpdate(CamelModel):
    display_name: str | None = Field(None, max_length=200)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=40)


class UserResponse(CamelModel):
    id: str
    uid: str | None
    email: str | None
    display_name: str | None
    first_name: str | None
    last_name: str | None
    phone: str | None
    docket_completed: bool
    archived: bool
    archived_at: str | None
    archived_reason: str | None
    created_at: str
    updated_at: str


class UserListResponse(CamelModel):
    users: list[UserResponse]
    total: int
    page: int
    per_page: int
