from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "ChefOverseasPortal"
    api_prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://127.0.0.1:5173", "http://localhost:5173"]
    log_level: str = "INFO"

    # Uploads are checked before anything touches disk.
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    allowed_upload_types: set[str] = {"application/pdf", "image/jpeg", "image/png"}

    session_ttl_seconds: int = 7 * 24 * 3600
    otp_ttl_seconds: int = 600

    archive_after_days: int = 365
    reminder_grace_seconds: int = 3600
    # "candidate" or "legacy_admin"; see services.docket_progress
    admin_checklist: str = "candidate"
    auto_approve_on_final_docket: bool = False

    scheduler_enabled: bool = True
    archive_interval_seconds: int = 24 * 3600
    sync_interval_seconds: int = 5 * 60
    reminder_interval_seconds: int = 24 * 3600

    @property
    def db_path(self) -> Path:
        return self.data_path / "portal.sqlite"

    @property
    def users_dir(self) -> Path:
        return self.data_path / "users"

    model_config = {"env_prefix": "PORTAL_"}


settings = Settings()
