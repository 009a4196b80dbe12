"""
api/limiter.py -- The one slowapi Limiter shared by the app and the auth routes.

api/main.py mounts it (app.state.limiter + SlowAPIMiddleware) and
api/routes/auth.py decorates register/login with @limiter.limit(). Both must
see this same object or the decorated limits are never counted.

Clients are keyed by remote address. Counters live wherever
Settings.rate_limit_storage_uri points; the default memory:// store is per
process, so a multi-worker deployment should point it at a shared backend.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(key_func=get_remote_address, storage_uri=get_settings().rate_limit_storage_uri)
