import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chefportal.config import settings
from chefportal.database import init_db
from chefportal.logging_config import configure_logging
from chefportal.routers import (
    admin,
    admin_archive,
    admin_contracts,
    admin_dockets,
    admin_maintenance,
    admin_users,
    admin_workpermits,
    auth,
    contracts,
    docket,
    files,
    workpermit,
)
from chefportal.services.auth_service import auth_service
from chefportal.services.scheduler import start_background_jobs, stop_background_jobs
from chefportal.utils.filesystem import ensure_data_dirs

logger = logging.getLogger("chefportal")

VERSION = "0.1.0"


def _check_integrity() -> None:
    try:
        conn = sqlite3.connect(str(settings.db_path))
        result = conn.execute("PRAGMA integrity_check").fetchone()
        conn.close()
    except sqlite3.Error as exc:
        logger.error("Could not run startup integrity check: %s", exc)
        return
    if result and result[0] == "ok":
        logger.info("Database integrity check passed.")
    else:
        logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    ensure_data_dirs()
    # Schema and migrations are idempotent.
    init_db()
    _check_integrity()
    tasks = start_background_jobs()
    yield
    await stop_background_jobs(tasks)
    auth_service.clear()


app = FastAPI(
    title="Chef Overseas Candidate Portal",
    description="Candidate onboarding: document dockets, contracts, work permits and archiving",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (
    auth, docket, contracts, workpermit, files,
    admin, admin_users, admin_dockets, admin_contracts, admin_workpermits, admin_archive, admin_maintenance,
):
    app.include_router(module.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
