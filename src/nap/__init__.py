"""
nap – composable HTTP request building with retries.

Import path convention::

    from nap.rest import RequestBuilder, Raw
    from nap.resilience.retry import RetryPolicy, error_propagated_retry_policy
    from nap.adapters.http import HttpxDoer, RetryDoer
    from nap.kernel.errors import RetryExhaustedError
"""
from nap.adapters.http import Doer, HttpxDoer, RetryDoer
from nap.resilience.cancellation import CancellationToken
from nap.resilience.retry import RetryPolicy
from nap.rest import Raw, RequestBuilder, Response, RestConfig

__version__ = "0.1.0"
__all__ = [
    "CancellationToken",
    "Doer",
    "HttpxDoer",
    "Raw",
    "RequestBuilder",
    "Response",
    "RestConfig",
    "RetryDoer",
    "RetryPolicy",
    "__version__",
]
