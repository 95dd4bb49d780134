import json
import logging
import unittest

from parallelid.logging_config import AuditLogger, StructuredFormatter, request_id_var, set_request_id


class TestStructuredLogging(unittest.TestCase):

    def setUp(self):
        self.token = request_id_var.set("")

    def tearDown(self):
        request_id_var.reset(self.token)

    def test_formatter_emits_json_with_request_id(self):
        set_request_id("req-42")
        record = logging.LogRecord("parallelid.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        entry = json.loads(StructuredFormatter().format(record))
        self.assertEqual(entry["message"], "hello world")
        self.assertEqual(entry["level"], "INFO")
        self.assertEqual(entry["request_id"], "req-42")

    def test_generated_request_id(self):
        request_id = set_request_id()
        self.assertTrue(request_id)
        self.assertEqual(request_id_var.get(), request_id)

    def test_audit_entry_carries_event_fields(self):
        audit = AuditLogger("parallelid.audit.test")
        with self.assertLogs("parallelid.audit.test", level="WARNING") as logs:
            audit.sanctions_match(token_id=3, jurisdiction=840)
        entry = json.loads(StructuredFormatter().format(logs.records[0]))
        self.assertEqual(entry["event_type"], "SANCTIONS_MATCH")
        self.assertEqual(entry["token_id"], 3)
        self.assertEqual(entry["jurisdiction"], 840)


if __name__ == "__main__":
    unittest.main()
