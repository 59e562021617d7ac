"""
Tasks run once from the FastAPI lifespan before requests are served.

- Create missing database tables
- Create the photo staging bucket
"""
import logging

from wardrobe.core.database import Base, engine
from wardrobe.core.exceptions import StorageError
from wardrobe.services.storage_service import get_storage_service

logger = logging.getLogger(__name__)


def initialize_database() -> None:
    """Create tables for all registered models."""
    import wardrobe.models  # noqa: F401  (registers models on Base)

    Base.metadata.create_all(bind=engine)
    logger.info(f"✅ Database schema ready ({', '.join(sorted(Base.metadata.tables))})")


def initialize_storage() -> None:
    """
    Create the staging bucket.

    A storage outage here is not fatal: uploads report ``storage_error``
    until the bucket becomes reachable and is created on first use.
    """
    try:
        get_storage_service().initialize_bucket()
    except StorageError as e:
        logger.warning(f"⚠️  Starting without object storage: {e}")


def run_startup_tasks() -> None:
    logger.info("=" * 60)
    logger.info("🚀 Preparing database and object storage")

    initialize_database()
    initialize_storage()

    logger.info("✅ Startup complete")
    logger.info("=" * 60)
