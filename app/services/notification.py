import structlog

from app.core.celery import celery_app

logger = structlog.get_logger(__name__)


@celery_app.task(name="app.services.notification.deliver_order_handoff")
def deliver_order_handoff(payload: dict) -> dict:
    """Record that an order hand-off is ready for the messaging channel.

    The customer sends the message from their own device, so the worker
    only logs the payload for the back office. Nothing here can fail
    transiently, so the task is not retried.
    """
    logger.info(
        "Order hand-off ready",
        order_reference=payload.get("order_reference"),
        service_name=payload.get("service_name"),
        total=payload.get("total"),
        currency=payload.get("currency"),
        url=payload.get("url"),
    )
    return {"order_reference": payload.get("order_reference"), "delivered": True}
