import unittest
import uuid
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from botocore.stub import ANY, Stubber

from qaboard.exceptions import StorageReadError, StorageWriteError
from qaboard.storage import (
    DynamoDbStorageClient,
    EntityKind,
    InMemoryStorageClient,
    build_record,
)


class BuildRecordTests(unittest.TestCase):
    def test_adds_uuid_primary_key(self):
        record = build_record(EntityKind.QUERY, {"name": "Ada", "query": "hi"})
        self.assertEqual(record["name"], "Ada")
        self.assertEqual(record["query"], "hi")
        self.assertEqual(str(uuid.UUID(record["queryid"])), record["queryid"])

    def test_generated_key_replaces_submitted_one(self):
        fields = {"answerid": "chosen-by-client", "answer": "42"}
        record = build_record(EntityKind.ANSWER, fields)
        self.assertNotEqual(record["answerid"], "chosen-by-client")
        self.assertEqual(fields["answerid"], "chosen-by-client")


class InMemoryStorageClientTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorageClient()

    def test_insert_then_scan(self):
        stored = self.storage.insert(EntityKind.QUESTION, {"question": "Why?"})
        records = self.storage.scan_all(EntityKind.QUESTION)
        self.assertEqual(records, [stored])
        self.assertEqual(self.storage.scan_all(EntityKind.ANSWER), [])

    def test_scan_returns_copies(self):
        self.storage.insert(EntityKind.EMAIL, {"email": "a@example.com"})
        self.storage.scan_all(EntityKind.EMAIL)[0]["email"] = "changed"
        self.assertEqual(
            self.storage.scan_all(EntityKind.EMAIL)[0]["email"], "a@example.com"
        )

    def test_reset(self):
        self.storage.insert(EntityKind.EMAIL, {"email": "a@example.com"})
        self.storage.reset()
        self.assertEqual(self.storage.scan_all(EntityKind.EMAIL), [])

    def test_concurrent_inserts_get_distinct_ids(self):
        with ThreadPoolExecutor(max_workers=16) as pool:
            records = list(
                pool.map(
                    lambda i: self.storage.insert(
                        EntityKind.QUESTION, {"question": f"q{i}"}
                    ),
                    range(100),
                )
            )
        ids = {record["questionid"] for record in records}
        self.assertEqual(len(ids), 100)
        self.assertEqual(len(self.storage.scan_all(EntityKind.QUESTION)), 100)


class DynamoDbStorageClientTests(unittest.TestCase):
    def setUp(self):
        self.storage = DynamoDbStorageClient(
            region="us-east-1",
            access_key_id="testing",
            secret_access_key="testing",
        )
        self.stubber = Stubber(self.storage.client)
        self.stubber.activate()

    def tearDown(self):
        self.stubber.deactivate()

    def test_insert_puts_item_into_kind_table(self):
        self.stubber.add_response(
            "put_item", {}, {"TableName": "Questions", "Item": ANY}
        )
        record = self.storage.insert(EntityKind.QUESTION, {"question": "Why?"})
        self.stubber.assert_no_pending_responses()
        self.assertEqual(record["question"], "Why?")
        self.assertIn("questionid", record)

    def test_insert_stores_floats_as_decimal(self):
        self.stubber.add_response(
            "put_item",
            {},
            {
                "TableName": "Answers",
                "Item": {"answer": Decimal("1.5"), "answerid": ANY},
            },
        )
        record = self.storage.insert(EntityKind.ANSWER, {"answer": 1.5})
        self.stubber.assert_no_pending_responses()
        self.assertEqual(record["answer"], Decimal("1.5"))

    def test_unserializable_value_raises_write_error(self):
        with self.assertRaises(StorageWriteError):
            self.storage.insert(EntityKind.ANSWER, {"answer": object()})
        self.stubber.assert_no_pending_responses()

    def test_table_name_override(self):
        storage = DynamoDbStorageClient(
            region="us-east-1",
            access_key_id="testing",
            secret_access_key="testing",
            table_names={EntityKind.EMAIL: "qaboard-emails"},
        )
        with Stubber(storage.client) as stubber:
            stubber.add_response(
                "put_item", {}, {"TableName": "qaboard-emails", "Item": ANY}
            )
            storage.insert(EntityKind.EMAIL, {"email": "a@example.com"})
            stubber.assert_no_pending_responses()
        self.assertEqual(storage.table_name(EntityKind.QUESTION), "Questions")

    def test_insert_failure_raises_write_error(self):
        self.stubber.add_client_error(
            "put_item",
            service_error_code="ResourceNotFoundException",
            service_message="Requested resource not found",
            http_status_code=400,
        )
        with self.assertRaises(StorageWriteError):
            self.storage.insert(EntityKind.ANSWER, {"answer": "42"})

    def test_scan_follows_pagination(self):
        self.stubber.add_response(
            "scan",
            {
                "Items": [{"answerid": {"S": "a-1"}, "answer": {"S": "first"}}],
                "Count": 1,
                "ScannedCount": 1,
                "LastEvaluatedKey": {"answerid": {"S": "a-1"}},
            },
            {"TableName": "Answers"},
        )
        self.stubber.add_response(
            "scan",
            {
                "Items": [{"answerid": {"S": "a-2"}, "answer": {"S": "second"}}],
                "Count": 1,
                "ScannedCount": 1,
            },
            {"TableName": "Answers", "ExclusiveStartKey": {"answerid": "a-1"}},
        )
        records = self.storage.scan_all(EntityKind.ANSWER)
        self.stubber.assert_no_pending_responses()
        self.assertEqual(
            records,
            [
                {"answerid": "a-1", "answer": "first"},
                {"answerid": "a-2", "answer": "second"},
            ],
        )

    def test_scan_failure_raises_read_error(self):
        self.stubber.add_client_error(
            "scan",
            service_error_code="ProvisionedThroughputExceededException",
            http_status_code=400,
        )
        with self.assertRaises(StorageReadError):
            self.storage.scan_all(EntityKind.QUESTION)


if __name__ == "__main__":
    unittest.main()
