from datetime import datetime, timedelta, timezone as dt_timezone

from django.test import SimpleTestCase

from assessments.windows import is_expired, minutes_remaining, session_expiry

NOW = datetime(2025, 3, 1, 9, 0, tzinfo=dt_timezone.utc)


class SessionExpiryTests(SimpleTestCase):
    def test_no_window_end_and_not_started_never_expires(self):
        self.assertIsNone(session_expiry(None, None, 60))

    def test_not_started_expires_at_window_end(self):
        end = NOW + timedelta(hours=3)
        self.assertEqual(session_expiry(end, None, 60), end)

    def test_duration_caps_a_long_window(self):
        end = NOW + timedelta(hours=3)
        self.assertEqual(session_expiry(end, NOW, 60), NOW + timedelta(minutes=60))

    def test_window_end_caps_a_late_start(self):
        end = NOW + timedelta(minutes=20)
        self.assertEqual(session_expiry(end, NOW, 60), end)

    def test_started_without_window_end_uses_duration(self):
        self.assertEqual(session_expiry(None, NOW, 45), NOW + timedelta(minutes=45))


class MinutesRemainingTests(SimpleTestCase):
    def test_floors_partial_minutes(self):
        self.assertEqual(minutes_remaining(NOW + timedelta(seconds=90), NOW), 1)
        self.assertEqual(minutes_remaining(NOW + timedelta(minutes=59, seconds=59), NOW), 59)

    def test_under_a_minute_is_zero(self):
        self.assertEqual(minutes_remaining(NOW + timedelta(seconds=30), NOW), 0)

    def test_passed_or_unknown_expiry(self):
        self.assertIsNone(minutes_remaining(NOW, NOW))
        self.assertIsNone(minutes_remaining(NOW - timedelta(minutes=5), NOW))
        self.assertIsNone(minutes_remaining(None, NOW))


class IsExpiredTests(SimpleTestCase):
    def test_expiry_instant_counts_as_expired(self):
        self.assertTrue(is_expired(NOW, NOW))
        self.assertTrue(is_expired(NOW - timedelta(seconds=1), NOW))
        self.assertFalse(is_expired(NOW + timedelta(seconds=1), NOW))

    def test_no_expiry(self):
        self.assertFalse(is_expired(None, NOW))
