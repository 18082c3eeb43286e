from pathlib import Path
from chefportal.config import settings


def ensure_data_dirs(data_path: Path | None = None) -> Path:
    path = data_path or settings.data_path
    path.mkdir(parents=True, exist_ok=True)
    (path / "users").mkdir(exist_ok=True)
    return path


def ensure_user_dir(user_id: str, category: str, data_path: Path | None = None) -> Path:
    path = data_path or settings.data_path
    target = path / "users" / user_id / category
    target.mkdir(parents=True, exist_ok=True)
    return target


def sanitize_filename(name: str) -> str:
    keep = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-")
    return "".join(c if c in keep else "_" for c in name)


def resolve_stored_path(relative_path: str, data_path: Path | None = None) -> Path | None:
    """Map a stored relative path back to disk, refusing anything outside the data dir."""
    root = (data_path or settings.data_path).resolve()
    candidate = (root / relative_path).resolve()
    if not candidate.is_relative_to(root):
        return None
    return candidate
