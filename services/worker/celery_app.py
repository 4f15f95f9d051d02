"""
Celery application configuration for background tasks
"""
import logging

import structlog
from celery import Celery
from celery.signals import worker_process_init, worker_process_shutdown

from packages.common.config import get_settings

settings = get_settings()

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.log_level)
    ),
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Create Celery app
app = Celery(
    "forum_categorization_worker",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

# Celery configuration
app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=600,  # 10 minutes hard limit
    task_soft_time_limit=540,  # 9 minutes soft limit

    # Result backend settings
    result_expires=3600,

    # Worker settings
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,

    task_routes={
        "services.worker.tasks.category_counts.*": {"queue": "maintenance"},
    },

    # Beat schedule (periodic tasks)
    beat_schedule={
        "sync-category-post-counts": {
            "task": "services.worker.tasks.category_counts.sync_category_post_counts",
            "schedule": settings.post_count_sync_schedule,
            "options": {"queue": "maintenance"},
        },
    },
)


@worker_process_init.connect
def init_worker(**kwargs):
    """Initialize worker process"""
    logger.info("celery_worker_starting",
                concurrency=kwargs.get("concurrency", "unknown"))


@worker_process_shutdown.connect
def shutdown_worker(**kwargs):
    """Clean up worker process"""
    logger.info("celery_worker_shutting_down")


# Import tasks explicitly to register them
from services.worker.tasks import category_counts  # noqa: E402,F401


if __name__ == "__main__":
    app.start()
