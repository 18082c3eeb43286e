import asyncio
import logging
from typing import Callable

from sqlalchemy.orm import Session

from chefportal.config import settings
from chefportal.database import SessionLocal
from chefportal.services.archive_service import archive_service
from chefportal.services.reminder_service import send_docket_reminders
from chefportal.services.sync_service import sync_service

logger = logging.getLogger(__name__)


async def _every(name: str, interval: int, job: Callable[[Session], object], initial_delay: float = 0):
    await asyncio.sleep(initial_delay)
    while True:
        db = SessionLocal()
        try:
            # Jobs use the sync ORM; keep them off the event loop.
            await asyncio.to_thread(job, db)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Scheduled job %s failed", name)
        finally:
            db.close()
        await asyncio.sleep(interval)


def start_background_jobs() -> list[asyncio.Task]:
    if not settings.scheduler_enabled:
        logger.info("Background jobs disabled")
        return []
    logger.info(
        "Starting background jobs: archive every %ds, sync every %ds, reminders every %ds",
        settings.archive_interval_seconds, settings.sync_interval_seconds, settings.reminder_interval_seconds,
    )
    return [
        asyncio.create_task(_every("auto-archive", settings.archive_interval_seconds,
                                   archive_service.run_auto_archive)),
        asyncio.create_task(_every("data-sync", settings.sync_interval_seconds, sync_service.run)),
        asyncio.create_task(_every("docket-reminders", settings.reminder_interval_seconds,
                                   send_docket_reminders, initial_delay=60)),
    ]


async def stop_background_jobs(tasks: list[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
