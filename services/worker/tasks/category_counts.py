"""
Category post count maintenance tasks

Incremental count updates happen inline on post create/recategorize; this task
recounts everything periodically to repair drift.
"""
import asyncio
from typing import Dict

import structlog
from celery import Task

from packages.common.database import sessionmanager, _ensure_initialized
from packages.domain.categorization.category_store import category_store
from services.worker.celery_app import app

logger = structlog.get_logger()


class MaintenanceTask(Task):
    """Base task for database maintenance with retry logic"""
    autoretry_for = (Exception,)
    retry_kwargs = {"max_retries": 3}
    retry_backoff = True


async def _sync_counts() -> Dict[str, int]:
    # Each task run gets its own event loop, so the engine must not outlive it
    await _ensure_initialized()
    try:
        async with sessionmanager.session() as db:
            return await category_store.sync_post_counts(db)
    finally:
        await sessionmanager.close()


@app.task(base=MaintenanceTask, name="services.worker.tasks.category_counts.sync_category_post_counts")
def sync_category_post_counts() -> Dict[str, int]:
    logger.info("post_count_sync_task_started")
    counts = asyncio.run(_sync_counts())
    logger.info("post_count_sync_task_complete", category_count=len(counts))
    return counts
