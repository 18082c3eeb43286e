from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from chefportal.dependencies import require_session
from chefportal.services.file_service import owner_of
from chefportal.utils.filesystem import resolve_stored_path

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/{relative_path:path}")
async def download_file(relative_path: str, session: dict = Depends(require_session)):
    owner = owner_of(relative_path)
    if owner is None:
        raise HTTPException(status_code=404, detail="File not found")
    if session["role"] != "admin" and owner != session["subject"]:
        raise HTTPException(status_code=403, detail="Not allowed to access this file")

    full_path = resolve_stored_path(relative_path)
    if full_path is None or not full_path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path=str(full_path), filename=full_path.name.split("_", 1)[-1])
