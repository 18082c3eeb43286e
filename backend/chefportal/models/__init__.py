from chefportal.models.config import PortalConfig
from chefportal.models.user import User
from chefportal.models.docket import Docket
from chefportal.models.contract import Contract
from chefportal.models.work_permit import WorkPermit
from chefportal.models.otp import OtpSession
from chefportal.models.audit import AuditLog
from chefportal.models.throttle import AuthThrottle

__all__ = ["PortalConfig", "User", "Docket", "Contract", "WorkPermit", "OtpSession", "AuditLog", "AuthThrottle"]
