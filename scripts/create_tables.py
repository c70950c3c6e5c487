"""
Create the DynamoDB tables qaboard writes to.

Each entity kind gets a table keyed by its string identifier, billed on
demand. Tables that already exist are left alone.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from botocore.exceptions import ClientError

from qaboard.config import get_settings
from qaboard.dependencies import table_names_from_settings
from qaboard.storage import DynamoDbStorageClient, EntityKind

logger = logging.getLogger(__name__)


def create_table(client, table_name: str, primary_key: str, wait: bool = True) -> bool:
    """Create one table. Returns False when it already existed."""
    try:
        client.create_table(
            TableName=table_name,
            KeySchema=[{"AttributeName": primary_key, "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": primary_key, "AttributeType": "S"}
            ],
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as exc:
        if exc.response.get("Error", {}).get("Code") == "ResourceInUseException":
            logger.info("Table %s already exists", table_name)
            return False
        raise
    if wait:
        client.get_waiter("table_exists").wait(TableName=table_name)
    logger.info("Created table %s (hash key %s)", table_name, primary_key)
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Create qaboard DynamoDB tables")
    parser.add_argument(
        "--endpoint-url",
        type=str,
        default=None,
        help="Override the DynamoDB endpoint (e.g. a local DynamoDB)",
    )
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Return without waiting for the tables to become active",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    settings = get_settings()
    storage = DynamoDbStorageClient(
        region=settings.aws_region,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        endpoint_url=args.endpoint_url or settings.dynamodb_endpoint_url,
        table_names=table_names_from_settings(settings),
    )
    try:
        for kind in EntityKind:
            create_table(
                storage.client,
                storage.table_name(kind),
                kind.primary_key,
                wait=not args.no_wait,
            )
    except ClientError:
        logger.exception("Failed to create tables")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
