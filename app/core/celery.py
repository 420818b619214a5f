from celery import Celery

from app.core.config import settings

NOTIFICATIONS_QUEUE = "notifications"

celery_app = Celery(
    "atlasvault",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.services.notification"],
)

# JSON only: hand-off payloads are plain dicts
celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    enable_utc=True,
    timezone="UTC",
    result_expires=3600,
    task_default_queue=NOTIFICATIONS_QUEUE,
    task_routes={"app.services.notification.*": {"queue": NOTIFICATIONS_QUEUE}},
    # Eager mode runs tasks inline; errors stay inside the task result
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    task_eager_propagates=False,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
)
