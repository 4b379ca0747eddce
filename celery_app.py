"""Celery application configuration for context tree maintenance tasks."""

from celery import Celery
from celery.schedules import crontab

from mutenancy.config import settings

celery = Celery("mutenancy")

celery.conf.update(
    broker_url=settings.celery_broker_url,
    result_backend=settings.celery_result_backend,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    # --- Queue routing per job type ---
    task_routes={
        "tenancy.*": {"queue": "context-maintenance"},
    },
    # --- Reliability settings ---
    task_default_retry_delay=60,
    task_max_retries=3,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    result_expires=86400,  # 24 hours
    # --- Broker transport options (Redis reliability) ---
    broker_transport_options={
        "max_retries": 10,
        "interval_start": 0.2,
        "interval_step": 0.5,
        "interval_max": 5.0,
        "retry_on_timeout": True,
        "visibility_timeout": 3600,
    },
    # --- Beat schedule ---
    beat_schedule={
        "create-tenant-contexts": {
            "task": "tenancy.create_tenant_contexts",
            "schedule": settings.context_paths_poll_seconds,
        },
        "build-context-paths": {
            "task": "tenancy.build_context_paths",
            "schedule": settings.context_paths_poll_seconds,
        },
        "fix-all-tenantids-nightly": {
            "task": "tenancy.fix_all_tenantids",
            "schedule": crontab(hour=settings.tenantid_reconcile_hour, minute=0),
        },
    },
)

celery.autodiscover_tasks([
    "mutenancy.modules.tenancy",
])
