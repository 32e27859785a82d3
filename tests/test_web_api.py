"""
Tests for the FastAPI host (offline, integration mocked).
"""

import unittest
import urllib.error
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from email_reputation import ConfigurationError, TransportError
from web.api import app


class TestWebApi(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        self.integration = MagicMock()
        patcher = patch("web.api.get_integration", return_value=self.integration)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_health(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")

    def test_info(self):
        body = self.client.get("/api/info").json()
        self.assertEqual(body["acronym"], "ER")
        self.assertIn("apiKey", [o["key"] for o in body["options"]])

    def test_lookup(self):
        self.integration.lookup.return_value = [{"entity": {"value": "a@x.com"}, "data": None}]

        resp = self.client.post(
            "/api/lookup",
            json={"entities": [{"value": "a@x.com", "type": "email"}], "options": {"apiKey": "k"}},
        )

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["results"][0]["data"], None)
        entities, options = self.integration.lookup.call_args.args
        self.assertEqual(entities, [{"value": "a@x.com", "type": "email"}])
        self.assertEqual(options, {"apiKey": "k"})

    def test_lookup_configuration_error_is_400(self):
        self.integration.lookup.side_effect = ConfigurationError("bad key", field="apiKey")

        resp = self.client.post("/api/lookup", json={"entities": [], "options": {}})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"]["key"], "apiKey")

    def test_lookup_batch_error_is_502(self):
        self.integration.lookup.side_effect = TransportError(
            "a@x.com", urllib.error.URLError("refused")
        )

        resp = self.client.post("/api/lookup", json={"entities": [], "options": {"apiKey": "k"}})

        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"]["entity"], "a@x.com")

    def test_validate(self):
        self.integration.validate_options.return_value = [
            {"key": "apiKey", "message": "You must provide a valid API key"}
        ]
        resp = self.client.post("/api/validate", json={"options": {"apiKey": {"value": ""}}})
        self.assertEqual(resp.json()["errors"][0]["key"], "apiKey")


if __name__ == "__main__":
    unittest.main()
