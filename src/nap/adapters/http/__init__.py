"""HTTP adapter – doers backed by httpx, plus retry."""
from nap.adapters.http.client import Doer, HttpxDoer, close_default_doer, default_doer
from nap.adapters.http.retry_client import RetryDoer
from nap.adapters.http.rewind import RESPONSE_READ_LIMIT, RewindableRequest, drain_body

__all__ = [
    "RESPONSE_READ_LIMIT",
    "Doer",
    "HttpxDoer",
    "RetryDoer",
    "RewindableRequest",
    "close_default_doer",
    "default_doer",
    "drain_body",
]
