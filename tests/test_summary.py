import unittest

from email_reputation.summary import summary_tags


class TestSummaryTags(unittest.TestCase):
    def test_full_payload(self):
        tags = summary_tags({"reputation": "high", "suspicious": False, "last_seen": "2020-01-01"})
        self.assertEqual(
            tags,
            [
                "Reputation: high",
                "Malicious Activity: false",
                "Suspicious: false",
                "Last Seen: 2020-01-01",
            ],
        )

    def test_minimal_payload_has_two_tags(self):
        self.assertEqual(summary_tags({}), ["Malicious Activity: false", "Suspicious: false"])

    def test_suspicious_true(self):
        self.assertIn("Suspicious: true", summary_tags({"suspicious": True}))

    def test_boolean_reputation_renders_like_suspicious(self):
        tags = summary_tags({"reputation": True, "suspicious": True})
        self.assertEqual(tags[0], "Reputation: true")
        self.assertEqual(tags[2], "Suspicious: true")

    def test_malicious_activity_nested_in_details(self):
        tags = summary_tags(
            {
                "reputation": "none",
                "suspicious": True,
                "details": {"malicious_activity": True, "last_seen": "07/26/2019"},
            }
        )
        self.assertEqual(
            tags,
            [
                "Reputation: none",
                "Malicious Activity: true",
                "Suspicious: true",
                "Last Seen: 07/26/2019",
            ],
        )

    def test_malicious_activity_top_level(self):
        self.assertEqual(summary_tags({"malicious_activity": True})[0], "Malicious Activity: true")

    def test_tag_count_bounds(self):
        payloads = [
            {},
            {"reputation": "low"},
            {"last_seen": "never"},
            {"reputation": "high", "last_seen": "2021-03-04", "suspicious": True},
        ]
        for payload in payloads:
            tags = summary_tags(payload)
            self.assertTrue(2 <= len(tags) <= 4)
            self.assertEqual(sum(t.startswith("Malicious Activity:") for t in tags), 1)
            self.assertEqual(sum(t.startswith("Suspicious:") for t in tags), 1)


if __name__ == "__main__":
    unittest.main()
