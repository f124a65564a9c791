from rest_framework.throttling import SimpleRateThrottle


class TerminalRateThrottle(SimpleRateThrottle):
    """Rate limit per scanning terminal.

    Staff accounts sharing a terminal share its budget; accounts with no
    terminal assigned are limited per user.
    """

    def get_cache_key(self, request, view):
        user = request.user
        if user and user.is_authenticated:
            ident = getattr(user, "terminal_id", "") or f"user-{user.pk}"
        else:
            ident = self.get_ident(request)
        return self.cache_format % {"scope": self.scope, "ident": ident}


class CheckInRateThrottle(TerminalRateThrottle):
    scope = "checkin"


class CheckOutRateThrottle(TerminalRateThrottle):
    scope = "checkout"


class StatsRateThrottle(SimpleRateThrottle):
    # public dashboards poll without logging in
    scope = "stats"

    def get_cache_key(self, request, view):
        return self.cache_format % {"scope": self.scope, "ident": self.get_ident(request)}
