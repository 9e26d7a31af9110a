"""REST – fluent RequestBuilder and the Do/Receive orchestration.

Example::

    from nap.rest import RequestBuilder

    api = RequestBuilder("https://api.example.com/v1/").set_auth_token(token)
    issues = api.clone().get("issues").query_struct(IssueParams(state="open"))
    result = issues.receive(list[Issue], ApiError)
    if result.succeeded:
        ...

A builder is mutable while its owner configures it. For concurrent use,
configure one template and ``clone()`` it per call.
"""
from __future__ import annotations

import base64
import threading
from typing import Any, Mapping

import httpx

from nap.adapters.http.client import Doer, HttpxDoer, default_doer
from nap.adapters.http.retry_client import RetryDoer
from nap.adapters.http.rewind import drain_body
from nap.kernel.errors import (
    BodyEncodeError,
    DecodeError,
    NapError,
    TransportError,
    URLResolutionError,
)
from nap.observability.logging import SensitiveFieldsFilter, get_logger
from nap.observability.metrics import Metrics, record_request
from nap.resilience.cancellation import CANCELLATION_EXTENSION, NEVER_CANCELLED, CancellationToken
from nap.resilience.retry import RetryPolicy
from nap.rest.body import (
    EMPTY_BODY,
    BodyProvider,
    BodySource,
    FormBody,
    JsonBody,
    MultipartBody,
    RawBody,
    UrlEncodedBody,
    XmlBody,
)
from nap.rest.config import RestConfig
from nap.rest.decoder import ResponseDecoder
from nap.rest.header import Header
from nap.rest.query import encode_sorted, encode_values, parse_query
from nap.rest.response import Raw, Response, SuccessDecider

_redactor = SensitiveFieldsFilter()


class RequestBuilder:
    """Accumulates method, URL, headers, query and body for one request."""

    def __init__(self, base_url: str | None = None, *, config: RestConfig | None = None) -> None:
        self._method = "GET"
        self._url: httpx.URL | None = None
        self._url_error: URLResolutionError | None = None
        self._header = Header()
        self._header_lock = threading.Lock()
        self._query_structs: list[Any] = []
        self._query_params: dict[str, str] = {}
        self._body: BodyProvider = EMPTY_BODY
        self._token: CancellationToken = NEVER_CANCELLED
        self._config = config or RestConfig()
        if base_url is not None:
            self.base(base_url)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def method(self) -> str:
        return self._method

    @property
    def raw_url(self) -> str:
        return str(self._url) if self._url is not None else ""

    @property
    def header(self) -> Header:
        """Snapshot of the current headers."""
        with self._header_lock:
            return self._header.copy()

    @property
    def config(self) -> RestConfig:
        return self._config

    def clone(self) -> "RequestBuilder":
        """Independent copy; the body provider is shared by reference."""
        clone = RequestBuilder.__new__(RequestBuilder)
        clone._method = self._method
        clone._url = self._url
        clone._url_error = self._url_error
        with self._header_lock:
            clone._header = self._header.copy()
        clone._header_lock = threading.Lock()
        clone._query_structs = list(self._query_structs)
        clone._query_params = dict(self._query_params)
        clone._body = self._body
        clone._token = self._token
        clone._config = self._config
        return clone

    # ------------------------------------------------------------------
    # Method and URL
    # ------------------------------------------------------------------

    def get(self, path: str = "") -> "RequestBuilder":
        return self._method_and_path("GET", path)

    def head(self, path: str = "") -> "RequestBuilder":
        return self._method_and_path("HEAD", path)

    def post(self, path: str = "") -> "RequestBuilder":
        return self._method_and_path("POST", path)

    def put(self, path: str = "") -> "RequestBuilder":
        return self._method_and_path("PUT", path)

    def patch(self, path: str = "") -> "RequestBuilder":
        return self._method_and_path("PATCH", path)

    def delete(self, path: str = "") -> "RequestBuilder":
        return self._method_and_path("DELETE", path)

    def options(self, path: str = "") -> "RequestBuilder":
        return self._method_and_path("OPTIONS", path)

    def _method_and_path(self, method: str, path: str) -> "RequestBuilder":
        self._method = method
        return self.path(path)

    def base(self, url: str) -> "RequestBuilder":
        """Set the base URL. Raises :class:`URLResolutionError` when unparsable."""
        try:
            self._url = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise URLResolutionError(url, f"invalid base URL {url!r}: {exc}", cause=exc) from exc
        self._url_error = None
        return self

    def path(self, ref: str) -> "RequestBuilder":
        """Resolve *ref* against the current URL.

        Without a base, *ref* becomes the base. A trailing slash on *ref*
        is kept. A parse failure surfaces from the next :meth:`request` unless
        a later :meth:`base` or successful :meth:`path` replaces the URL.
        """
        if not ref:
            return self
        try:
            ref_url = httpx.URL(ref)
            if self._url is None:
                self._url = ref_url
                self._url_error = None
                return self
            resolved = self._url.join(ref_url)
        except httpx.InvalidURL as exc:
            self._url_error = URLResolutionError(ref, f"invalid path {ref!r}: {exc}", cause=exc)
            return self
        if ref_url.path.endswith("/") and not resolved.path.endswith("/"):
            resolved = resolved.copy_with(path=resolved.path + "/")
        self._url = resolved
        self._url_error = None
        return self

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def add_header(self, key: str, value: str) -> "RequestBuilder":
        with self._header_lock:
            self._header.add(key, value)
        return self

    def set_header(self, key: str, value: str) -> "RequestBuilder":
        with self._header_lock:
            self._header.set(key, value)
        return self

    def set_headers(self, headers: Mapping[str, str]) -> "RequestBuilder":
        with self._header_lock:
            for key, value in headers.items():
                self._header.set(key, value)
        return self

    def set_basic_auth(self, username: str, password: str) -> "RequestBuilder":
        credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
        return self.set_header("Authorization", f"Basic {credentials}")

    def set_auth_token(self, token: str) -> "RequestBuilder":
        return self.set_header("Authorization", f"Bearer {token}")

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query_struct(self, query: Any) -> "RequestBuilder":
        if query is not None:
            self._query_structs.append(query)
        return self

    def query_params(self, params: Mapping[str, str] | None) -> "RequestBuilder":
        if params is not None:
            self._query_params = {str(k): str(v) for k, v in params.items()}
        return self

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def body_provider(self, provider: BodyProvider | None) -> "RequestBuilder":
        if provider is None:
            return self
        self._body = provider
        if provider.content_type:
            self.set_header("Content-Type", provider.content_type)
        return self

    def body(self, source: BodySource | None) -> "RequestBuilder":
        if source is None:
            return self
        return self.body_provider(RawBody(source))

    def body_json(self, payload: Any) -> "RequestBuilder":
        if payload is None:
            return self
        return self.body_provider(JsonBody(payload))

    def body_form(self, payload: Any) -> "RequestBuilder":
        if payload is None:
            return self
        return self.body_provider(FormBody(payload))

    def body_url_encoded(self, values: Mapping[str, str] | None) -> "RequestBuilder":
        if values is None:
            return self
        return self.body_provider(UrlEncodedBody(values))

    def body_multipart(
        self,
        fields: Mapping[str, BodySource] | None = None,
        files: Mapping[str, BodySource] | None = None,
    ) -> "RequestBuilder":
        if fields is None and files is None:
            return self
        return self.body_provider(MultipartBody(fields, files))

    def body_xml(self, payload: Any, root: str | None = None) -> "RequestBuilder":
        if payload is None:
            return self
        return self.body_provider(XmlBody(payload, root=root))

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def response_decoder(self, decoder: ResponseDecoder | None) -> "RequestBuilder":
        if decoder is not None:
            self._config = self._config.evolve(response_decoder=decoder)
        return self

    def success_decider(self, decider: SuccessDecider | None) -> "RequestBuilder":
        if decider is not None:
            self._config = self._config.evolve(success_decider=decider)
        return self

    def doer(self, doer: Doer | None) -> "RequestBuilder":
        """Use *doer* for sending; ``None`` restores the process default."""
        self._config = self._config.evolve(doer=doer)
        return self

    def client(self, client: httpx.Client | None) -> "RequestBuilder":
        return self.doer(HttpxDoer(client) if client is not None else None)

    def metrics(self, metrics: Metrics) -> "RequestBuilder":
        self._config = self._config.evolve(metrics=metrics)
        return self

    def with_cancellation(self, token: CancellationToken | None) -> "RequestBuilder":
        self._token = token or NEVER_CANCELLED
        return self

    def auto_retry(self, policy: RetryPolicy | None = None, **overrides: Any) -> "RequestBuilder":
        """Wrap the current doer in a :class:`RetryDoer`.

        Keyword *overrides* are applied on top of *policy* (or the default
        policy), e.g. ``auto_retry(retry_max=2, wait_min=0.1)``.
        """
        policy = policy or RetryPolicy()
        if overrides:
            policy = policy.evolve(**overrides)
        return self.doer(RetryDoer(self._config.doer, policy))

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def request(self) -> httpx.Request:
        """Build the ``httpx.Request`` described so far."""
        if self._url_error is not None:
            raise self._url_error
        if self._url is None:
            raise URLResolutionError("", "no URL configured")

        url = self._url
        pairs = parse_query(url.query.decode("ascii"))
        try:
            for query in self._query_structs:
                pairs.extend(encode_values(query))
        except (TypeError, ValueError) as exc:
            raise URLResolutionError(str(url), f"cannot encode query: {exc}", cause=exc) from exc
        pairs.extend(self._query_params.items())
        if pairs:
            url = url.copy_with(query=encode_sorted(pairs).encode("ascii"))

        encoded = self._body.encode()
        with self._header_lock:
            header = self._header.copy()
        if encoded.content_type and "Content-Type" not in header:
            header.set("Content-Type", encoded.content_type)

        try:
            return httpx.Request(
                self._method,
                url,
                headers=header.multi_items(),
                content=encoded.content or None,
                extensions={CANCELLATION_EXTENSION: self._token},
            )
        except httpx.InvalidURL as exc:
            raise URLResolutionError(str(url), str(exc), cause=exc) from exc
        except UnicodeEncodeError as exc:
            raise BodyEncodeError(f"cannot encode request headers: {exc}", cause=exc) from exc

    def do(self, request: httpx.Request, success: Any = None, failure: Any = None) -> Response:
        """Send *request* and decode the response into *success* or *failure*.

        Targets are types (``MyModel``, ``list[Item]``, ``dict``...) or the
        :class:`Raw` sentinel. The response body is always consumed and the
        response closed before this returns or raises.
        """
        config = self._config
        log = get_logger(config.logger_name)
        where = {"method": request.method, "url": str(request.url)}
        doer = config.doer or default_doer()
        try:
            http_response = doer.execute(request)
        except httpx.HTTPError as exc:
            error = TransportError(
                f"{request.method} {request.url}: {str(exc) or type(exc).__name__}",
                cause=exc,
                **where,
            )
            log.error("request.failed", **where, error=str(error))
            raise error from exc
        except NapError as exc:
            log.error("request.failed", **where, error=str(exc))
            raise

        record_request(config.metrics, request, http_response.status_code)
        try:
            result = self._decode(http_response, success, failure, log)
        except httpx.HTTPError as exc:
            error = TransportError(
                f"{request.method} {request.url}: reading response failed: {exc}",
                cause=exc,
                **where,
            )
            log.error(
                "request.failed", **where, status_code=http_response.status_code, error=str(error)
            )
            raise error from exc
        except DecodeError as exc:
            log.error(
                "request.failed", **where, status_code=http_response.status_code, error=str(exc)
            )
            raise
        finally:
            drain_body(http_response, limit=None)

        log.info(
            "request.sent",
            **where,
            status_code=http_response.status_code,
            succeeded=result.succeeded,
            headers=_redactor.redact_headers(request.headers.multi_items()),
        )
        return result

    def _decode(self, response: httpx.Response, success: Any, failure: Any, log: Any) -> Response:
        config = self._config
        if response.status_code == httpx.codes.NO_CONTENT:
            return Response(response)

        succeeded = config.success_decider(response.status_code)
        target = success if succeeded else failure
        if target is None:
            log.debug("response.discarded", status_code=response.status_code, succeeded=succeeded)
            return Response(response, succeeded=succeeded)

        if target is Raw:
            value: Any = Raw(response.read())
        else:
            value = config.response_decoder.decode(response, target)
        log.debug("response.decoded", status_code=response.status_code, succeeded=succeeded)
        if succeeded:
            return Response(response, succeeded=True, success=value)
        return Response(response, succeeded=False, failure=value)

    def receive(self, success: Any = None, failure: Any = None) -> Response:
        """:meth:`request` followed by :meth:`do`."""
        return self.do(self.request(), success, failure)

    def receive_success(self, success: Any = None) -> Response:
        return self.receive(success, None)


__all__ = ["RequestBuilder"]
