from pydantic import EmailStr, Field

from chefportal.schemas.base import CamelModel
from chefportal.schemas.user import UserResponse


class AdminSetupRequest(CamelModel):
    email: EmailStr
    password: str


class AdminLoginRequest(CamelModel):
    email: EmailStr
    password: str


class SessionResponse(CamelModel):
    token: str
    expires_in_seconds: int


class ThrottleResponse(CamelModel):
    error: str
    retry_after_seconds: float


class AdminMeResponse(CamelModel):
    email: str
    role: str = "admin"


class SendOtpRequest(CamelModel):
    email: EmailStr


class VerifyOtpRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., min_length=6, max_length=6)


class CandidateLoginResponse(SessionResponse):
    user: UserResponse
