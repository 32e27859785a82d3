"""
Tests for the EmailRep client (offline, mocked opener).
"""

import io
import json
import socket
import unittest
import urllib.error
from unittest.mock import MagicMock, patch

from email_reputation.client import ReputationClient, build_opener, build_ssl_context
from email_reputation.models import (
    Hit,
    Identifier,
    Miss,
    RateLimited,
    TransportFailure,
    UpstreamFailure,
)
from email_reputation.settings import RequestSettings


class FakeResponse:
    def __init__(self, body, status=200, headers=None):
        self._raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        self.status = status
        self.headers = headers or {}

    def read(self):
        return self._raw

    def getcode(self):
        return self.status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def http_error(code, body=b"", headers=None):
    return urllib.error.HTTPError(
        "https://emailrep.io/x", code, "error", headers or {}, io.BytesIO(body)
    )


class TestReputationClient(unittest.TestCase):
    def setUp(self):
        self.opener = MagicMock()
        self.client = ReputationClient(RequestSettings(timeout=5), opener=self.opener)
        self.ident = Identifier("email", "a@example.com")

    def test_request_shape(self):
        self.opener.open.return_value = FakeResponse({"reputation": "high"})

        self.client.lookup(self.ident, "secret")

        req = self.opener.open.call_args.args[0]
        self.assertEqual(req.full_url, "https://emailrep.io/a@example.com?summary=true")
        self.assertEqual(req.get_method(), "GET")
        self.assertEqual(req.get_header("Key"), "secret")
        self.assertEqual(req.get_header("Content-type"), "application/json")
        self.assertEqual(self.opener.open.call_args.kwargs["timeout"], 5)

    def test_value_is_path_encoded(self):
        url = self.client.url_for(Identifier("email", "a b/c@example.com"))
        self.assertEqual(url, "https://emailrep.io/a%20b%2Fc@example.com?summary=true")

    def test_hit_with_counters(self):
        self.opener.open.return_value = FakeResponse(
            {"reputation": "high"},
            headers={
                "x-rate-limit-daily-remaining": "99",
                "x-rate-limit-monthly-remaining": "999",
            },
        )

        outcome = self.client.lookup(self.ident, "k")

        self.assertIsInstance(outcome, Hit)
        self.assertEqual(outcome.payload, {"reputation": "high"})
        self.assertEqual(outcome.counters.daily_remaining, "99")
        self.assertEqual(outcome.counters.monthly_remaining, "999")

    def test_hit_without_counters(self):
        self.opener.open.return_value = FakeResponse({"reputation": "low"})
        outcome = self.client.lookup(self.ident, "k")
        self.assertIsNone(outcome.counters.daily_remaining)
        self.assertIsNone(outcome.counters.monthly_remaining)

    def test_empty_array_is_miss(self):
        self.opener.open.return_value = FakeResponse([])
        self.assertIsInstance(self.client.lookup(self.ident, "k"), Miss)

    def test_empty_body_is_hit_without_payload(self):
        self.opener.open.return_value = FakeResponse(b"")
        outcome = self.client.lookup(self.ident, "k")
        self.assertIsInstance(outcome, Hit)
        self.assertIsNone(outcome.payload)

    def test_unparseable_body_is_upstream_failure(self):
        self.opener.open.return_value = FakeResponse(b"<html>")
        outcome = self.client.lookup(self.ident, "k")
        self.assertIsInstance(outcome, UpstreamFailure)
        self.assertEqual(outcome.status, 200)
        self.assertEqual(outcome.body, "<html>")

    def test_non_object_body_is_upstream_failure(self):
        self.opener.open.return_value = FakeResponse(["x"])
        outcome = self.client.lookup(self.ident, "k")
        self.assertIsInstance(outcome, UpstreamFailure)
        self.assertEqual(outcome.status, 200)
        self.assertEqual(outcome.body, '["x"]')

    def test_429_is_rate_limited(self):
        self.opener.open.side_effect = http_error(
            429, b'{"status":"fail"}', {"x-rate-limit-daily-remaining": "0"}
        )

        outcome = self.client.lookup(self.ident, "k")

        self.assertIsInstance(outcome, RateLimited)
        self.assertEqual(outcome.counters.daily_remaining, "0")
        self.assertIsNone(outcome.counters.monthly_remaining)

    def test_other_status_is_upstream_failure(self):
        self.opener.open.side_effect = http_error(401, b'{"reason":"invalid key"}')

        outcome = self.client.lookup(self.ident, "k")

        self.assertIsInstance(outcome, UpstreamFailure)
        self.assertEqual(outcome.status, 401)
        self.assertIn("invalid key", outcome.body)

    def test_unexpected_2xx_is_upstream_failure(self):
        self.opener.open.return_value = FakeResponse(b"", status=204)
        outcome = self.client.lookup(self.ident, "k")
        self.assertIsInstance(outcome, UpstreamFailure)
        self.assertEqual(outcome.status, 204)

    def test_network_error_is_transport_failure(self):
        cause = urllib.error.URLError("connection refused")
        self.opener.open.side_effect = cause

        outcome = self.client.lookup(self.ident, "k")

        self.assertIsInstance(outcome, TransportFailure)
        self.assertIs(outcome.cause, cause)

    def test_timeout_is_transport_failure(self):
        self.opener.open.side_effect = socket.timeout("timed out")
        self.assertIsInstance(self.client.lookup(self.ident, "k"), TransportFailure)

    def test_api_key_not_logged(self):
        self.opener.open.return_value = FakeResponse([])
        with self.assertLogs("email_reputation.client", level="DEBUG") as logs:
            self.client.lookup(self.ident, "super-secret")
        self.assertNotIn("super-secret", "".join(logs.output))
        self.assertTrue(all("super-secret" not in str(r.__dict__) for r in logs.records))


class TestOpener(unittest.TestCase):
    def test_no_tls_material_means_default_context(self):
        self.assertIsNone(build_ssl_context(RequestSettings()))

    @patch("email_reputation.client.ssl.create_default_context")
    def test_client_cert_loaded(self, mock_ctx):
        settings = RequestSettings(cert="c.pem", key="k.pem", passphrase="pw", ca="ca.pem")

        ctx = build_ssl_context(settings)

        mock_ctx.assert_called_once_with(cafile="ca.pem")
        ctx.load_cert_chain.assert_called_once_with("c.pem", keyfile="k.pem", password="pw")

    def test_proxy_handler_installed(self):
        opener = build_opener(RequestSettings(proxy="http://proxy:3128"))
        proxies = [h for h in opener.handlers if h.__class__.__name__ == "ProxyHandler"]
        self.assertEqual(proxies[0].proxies["https"], "http://proxy:3128")


if __name__ == "__main__":
    unittest.main()
