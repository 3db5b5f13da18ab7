"""
Rate Limiting Configuration

This module sets up the slowapi Limiter used to decorate the public API
routes. Counters live in the storage configured by RATE_LIMIT_STORAGE_URI
(in-process memory by default, Redis when several workers share limits).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from whispers.config import settings

# Viewers poll the listing on refresh; one request a second per client is plenty
LISTING_LIMIT = "60/minute"

# Clients are keyed by IP address
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
)
