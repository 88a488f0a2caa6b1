"""
Student Intake - Process Entry Point

Owns the lifecycle of the key/value store and the pipeline built on it:

    async with lifespan() as pipeline:
        result = await pipeline.submit(form_data)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from intake.core.config import Settings, get_settings
from intake.core.kv import init_store
from intake.core.logging_config import configure_logging
from intake.modules.student_applications import ApplicationPipeline, create_pipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(settings: Settings | None = None) -> AsyncIterator[ApplicationPipeline]:
    """
    Process lifespan manager.

    Configures logging, opens the key/value store, yields a pipeline, and
    closes the store on exit.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    logger.info(f"Starting student intake in {settings.python_env} mode...")
    try:
        store = await init_store(settings)
    except Exception as e:
        logger.error(f"Store connection failed: {e}")
        raise

    try:
        yield create_pipeline(store, settings)
    finally:
        logger.info("Shutting down student intake...")
        await store.close()
