"""Celery application shared by the event publisher and the search worker."""
from celery import Celery
from kombu import Exchange, Queue, binding

from app.config import get_settings

settings = get_settings()

events_exchange = Exchange(settings.events_exchange, type="topic", durable=True)

search_queue = Queue(
    settings.search_queue,
    [
        binding(events_exchange, routing_key="question.#"),
        binding(events_exchange, routing_key="answer.#"),
    ],
    durable=True,
)


def create_celery_app(broker_url: str) -> Celery:
    """Build a Celery app wired to the events exchange and the search queue."""
    app = Celery("overflow", broker=broker_url)
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        task_ignore_result=True,
        task_queues=(search_queue,),
        task_default_queue=search_queue.name,
        task_default_exchange=settings.events_exchange,
        task_default_exchange_type="topic",
        # Publishing is fire-and-forget: a broker failure surfaces to the caller.
        task_publish_retry=False,
        # Ack after the projection ran so a crashed worker gets the event redelivered.
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_prefetch_multiplier=1,
        broker_connection_retry_on_startup=True,
    )
    return app


celery_app = create_celery_app(settings.broker_url)
