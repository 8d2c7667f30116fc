"""Publishes domain events to the message broker."""
import logging

from app.celery_app import celery_app, events_exchange, search_queue
from app.models.events import DomainEvent
from app.utils.exceptions import BrokerError

logger = logging.getLogger(__name__)


class EventPublisher:
    """Sends each domain event as one task message on the events exchange.

    The exchange, the search queue and its bindings are declared with every
    publish, so events sent before any worker has started are queued rather
    than dropped.

    There is no delivery confirmation, retry or outbox: the relational write
    has already committed when ``publish`` runs, so a broker failure leaves
    the search index stale until the next event for that question.
    """

    def __init__(self, app=None):
        self.app = app or celery_app

    def publish(self, event: DomainEvent) -> None:
        payload = event.model_dump(mode="json")
        try:
            self.app.send_task(
                event.task_name,
                kwargs={"payload": payload},
                exchange=events_exchange,
                routing_key=event.routing_key,
                declare=[search_queue],
            )
        except Exception as e:
            logger.error(f"Failed to publish {type(event).__name__} ({event.routing_key}): {e}")
            raise BrokerError(f"Failed to publish {type(event).__name__}") from e

        logger.info(f"Published {type(event).__name__}: {payload}")
