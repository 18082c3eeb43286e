"""
Outbound candidate messages.

Mail delivery is handled outside this service; messages are written to
the log where the delivery agent picks them up.
"""
import logging

logger = logging.getLogger("chefportal.notifier")


def send_otp(email: str, code: str, ttl_seconds: int) -> bool:
    logger.info("OTP for %s issued (valid %d minutes)", email, ttl_seconds // 60)
    logger.debug("OTP code for %s: %s", email, code)
    return True


def send_docket_reminder(email: str, name: str, missing: list[str]) -> bool:
    if not email:
        logger.warning("Cannot send docket reminder to %s: no email address", name)
        return False
    logger.info("Docket reminder to %s <%s>: missing %s", name, email, ", ".join(missing))
    return True
