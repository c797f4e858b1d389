"""Rate limiter for endpoints that call paid external APIs."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from jobprep.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
