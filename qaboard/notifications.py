"""
Best-effort notifications about new submissions.

Publishing never raises: a failed publish is logged and reported through the
return value, since the submission itself has already been stored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from qaboard.exceptions import NotificationError

logger = logging.getLogger(__name__)


class NotificationPublisher(Protocol):
    """Fire-and-forget publishing to a single topic."""

    def publish(self, message: str) -> bool:
        ...


@dataclass
class InMemoryNotificationPublisher:
    """Collects published messages for tests/dev."""

    messages: list[str] = field(default_factory=list)

    def publish(self, message: str) -> bool:
        self.messages.append(message)
        return True


class NullNotificationPublisher:
    """Used when no topic is configured; messages are dropped."""

    def publish(self, message: str) -> bool:
        logger.info("No notification topic configured, dropping: %s", message)
        return False


@dataclass
class SnsNotificationPublisher:
    """Publishes plain-text messages to an SNS topic."""

    topic_arn: str
    region: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None

    def __post_init__(self):
        self._client = boto3.client(
            "sns",
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
        )

    @property
    def client(self):
        return self._client

    def send(self, message: str) -> str:
        """Publish ``message`` and return the SNS message id."""
        try:
            response = self._client.publish(TopicArn=self.topic_arn, Message=message)
        except (BotoCoreError, ClientError) as exc:
            raise NotificationError(
                f"Failed to publish to {self.topic_arn}: {exc}"
            ) from exc
        return response.get("MessageId", "")

    def publish(self, message: str) -> bool:
        try:
            message_id = self.send(message)
        except NotificationError:
            logger.exception("Error publishing message to SNS")
            return False
        logger.info("Message published to SNS (%s): %s", message_id, message)
        return True
