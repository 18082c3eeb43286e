import logging
import sys

from chefportal.config import settings


def configure_logging() -> None:
    """
    Configure logging for the whole service.
    Called once from the FastAPI lifespan; safe to call again.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
