"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging

from qaboard.config import Settings, get_settings
from qaboard.notifications import (
    InMemoryNotificationPublisher,
    NotificationPublisher,
    NullNotificationPublisher,
    SnsNotificationPublisher,
)
from qaboard.storage import (
    DynamoDbStorageClient,
    EntityKind,
    InMemoryStorageClient,
    StorageClient,
)

logger = logging.getLogger(__name__)

_storage_client: StorageClient | None = None
_notification_publisher: NotificationPublisher | None = None


def table_names_from_settings(settings: Settings) -> dict[EntityKind, str]:
    return {
        EntityKind.QUESTION: settings.questions_table,
        EntityKind.ANSWER: settings.answers_table,
        EntityKind.QUERY: settings.queries_table,
        EntityKind.EMAIL: settings.emails_table,
    }


def get_storage_client() -> StorageClient:
    """
    Return a singleton storage client shared by every request.
    """
    global _storage_client
    if _storage_client is not None:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _storage_client = InMemoryStorageClient()
    else:
        if not settings.aws_region:
            logger.warning("AWS_REGION is not set, relying on the boto3 defaults")
        _storage_client = DynamoDbStorageClient(
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            endpoint_url=settings.dynamodb_endpoint_url,
            table_names=table_names_from_settings(settings),
        )
    logger.info("Storage client: %s", _storage_client.__class__.__name__)
    return _storage_client


def get_notification_publisher() -> NotificationPublisher:
    global _notification_publisher
    if _notification_publisher is not None:
        return _notification_publisher

    settings = get_settings()
    if settings.use_in_memory_backends:
        _notification_publisher = InMemoryNotificationPublisher()
    elif not settings.sns_topic_arn:
        _notification_publisher = NullNotificationPublisher()
    else:
        _notification_publisher = SnsNotificationPublisher(
            topic_arn=settings.sns_topic_arn,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )
    logger.info(
        "Notification publisher: %s", _notification_publisher.__class__.__name__
    )
    return _notification_publisher


def init_clients() -> None:
    """Build both client singletons ahead of the first request."""
    get_storage_client()
    get_notification_publisher()


def reset_clients() -> None:
    """Drop the cached clients so the next lookup rebuilds them from settings."""
    global _storage_client, _notification_publisher
    _storage_client = None
    _notification_publisher = None
