from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, TestCase

from assembly.throttles import CheckInRateThrottle, CheckOutRateThrottle, StatsRateThrottle


class ThrottleKeyTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        user_model = get_user_model()
        self.first = user_model.objects.create_user(username="entry-a", password="pass1234", terminal_id="ENTRY-1")
        self.second = user_model.objects.create_user(username="entry-b", password="pass1234", terminal_id="ENTRY-1")
        self.roaming = user_model.objects.create_user(username="roaming", password="pass1234")

    def _request(self, user):
        request = self.factory.post("/api/journeys/checkin/")
        request.user = user
        return request

    def test_staff_on_one_terminal_share_a_key(self):
        throttle = CheckInRateThrottle()

        first_key = throttle.get_cache_key(self._request(self.first), None)

        self.assertEqual(first_key, throttle.get_cache_key(self._request(self.second), None))
        self.assertIn("ENTRY-1", first_key)

    def test_user_without_terminal_keyed_by_user(self):
        key = CheckOutRateThrottle().get_cache_key(self._request(self.roaming), None)
        self.assertIn(f"user-{self.roaming.pk}", key)

    def test_check_in_and_check_out_budgets_are_separate(self):
        request = self._request(self.first)
        self.assertNotEqual(
            CheckInRateThrottle().get_cache_key(request, None),
            CheckOutRateThrottle().get_cache_key(request, None),
        )

    def test_stats_keyed_by_client_address(self):
        request = self._request(AnonymousUser())
        self.assertIn("127.0.0.1", StatsRateThrottle().get_cache_key(request, None))
