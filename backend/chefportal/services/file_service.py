import hashlib
import os
from dataclasses import dataclass

from fastapi import UploadFile

from chefportal.config import settings
from chefportal.utils.filesystem import ensure_user_dir, sanitize_filename

PDF_ONLY = {"application/pdf"}
FILES_ROUTE = "/files"


class UploadRejected(ValueError):
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


@dataclass
class StoredFile:
    url: str
    name: str
    size: int
    file_hash: str
    content: bytes

    def as_entry(self) -> dict:
        return {"name": self.name, "url": self.url, "size": self.size}


async def read_upload(file: UploadFile, allowed_types: set[str] | None = None) -> bytes:
    """Read an upload, enforcing type and size limits before anything is stored."""
    allowed = allowed_types or settings.allowed_upload_types
    if file.content_type not in allowed:
        raise UploadRejected(415, f"Unsupported file type {file.content_type!r}. Allowed: {sorted(allowed)}")

    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise UploadRejected(413, f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)

    content = b"".join(chunks)
    if not content:
        raise UploadRejected(400, "Empty file")
    if allowed == PDF_ONLY and not content.startswith(b"%PDF-"):
        raise UploadRejected(415, "File is not a PDF document")
    return content


def store_file(user_id: str, category: str, filename: str | None, content: bytes) -> StoredFile:
    """Store an upload immutably under the user's directory."""
    file_hash = hashlib.sha256(content).hexdigest()
    safe_name = sanitize_filename(filename or "upload")
    stored_name = f"{file_hash[:8]}_{safe_name}"

    target_dir = ensure_user_dir(user_id, category)
    path = target_dir / stored_name
    if not path.exists():
        path.write_bytes(content)
        os.chmod(path, 0o444)

    relative_path = f"users/{user_id}/{category}/{stored_name}"
    return StoredFile(
        url=f"{settings.api_prefix}{FILES_ROUTE}/{relative_path}",
        name=filename or safe_name,
        size=len(content),
        file_hash=file_hash,
        content=content,
    )


async def save_upload(user_id: str, category: str, file: UploadFile,
                      allowed_types: set[str] | None = None) -> StoredFile:
    content = await read_upload(file, allowed_types)
    return store_file(user_id, category, file.filename, content)


def owner_of(relative_path: str) -> str | None:
    parts = relative_path.split("/")
    if len(parts) >= 3 and parts[0] == "users":
        return parts[1]
    return None
