"""Rate limiting utilities.

Wraps the slowapi limiter; `settings.rate_limit_enabled` (off under TestSettings)
swaps in a no-op so fixtures can register and vote freely. Per-route limits
(login, register, vote) come from settings.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings


class _NoOpLimiter:
    """Stand-in used when rate limiting is switched off."""

    enabled = False

    def limit(self, *args, **kwargs):
        def decorator(func):
            return func

        return decorator


if settings.rate_limit_enabled:
    limiter = Limiter(
        key_func=get_remote_address, default_limits=[settings.rate_limit_default]
    )
else:
    limiter = _NoOpLimiter()


__all__ = ["limiter"]
