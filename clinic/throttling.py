from rest_framework.throttling import SimpleRateThrottle


class ClientIPRateThrottle(SimpleRateThrottle):
    """Rate limit by client address, regardless of authentication."""

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


class LoginThrottle(ClientIPRateThrottle):
    scope = 'login'


class PaymentsThrottle(ClientIPRateThrottle):
    scope = 'payments'
