import secrets
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, VerifyMismatchError

ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)


def hash_secret(secret: str) -> str:
    return ph.hash(secret)


def verify_secret(stored_hash: str, secret: str) -> bool:
    try:
        return ph.verify(stored_hash, secret)
    except (VerifyMismatchError, VerificationError):
        return False


def generate_token() -> str:
    return secrets.token_hex(32)


def generate_otp() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def generate_uid() -> str:
    """8-digit public identifier shown to candidates."""
    return f"{secrets.randbelow(90000000) + 10000000}"
