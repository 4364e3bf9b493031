"""Rate limiter configuration module.

Kept out of main.py so routers can import the limiter without circular imports.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

LOGIN_RATE_LIMIT = "5/minute"
REGISTER_RATE_LIMIT = "20/minute"

limiter = Limiter(key_func=get_remote_address)
