"""REST – fluent request building, body encoding and response decoding."""
from nap.rest.body import (
    EMPTY_BODY,
    BodyProvider,
    EmptyBody,
    EncodedBody,
    FormBody,
    JsonBody,
    MultipartBody,
    RawBody,
    UrlEncodedBody,
    XmlBody,
)
from nap.rest.builder import RequestBuilder
from nap.rest.config import RestConfig
from nap.rest.decoder import JsonDecoder, ResponseDecoder, XmlDecoder
from nap.rest.header import Header, canonical_key
from nap.rest.query import encode_values, url_field
from nap.rest.response import Raw, Response, SuccessDecider, decode_on_success

__all__ = [
    "EMPTY_BODY",
    "BodyProvider",
    "EmptyBody",
    "EncodedBody",
    "FormBody",
    "Header",
    "JsonBody",
    "JsonDecoder",
    "MultipartBody",
    "Raw",
    "RawBody",
    "RequestBuilder",
    "Response",
    "ResponseDecoder",
    "RestConfig",
    "SuccessDecider",
    "UrlEncodedBody",
    "XmlBody",
    "XmlDecoder",
    "canonical_key",
    "decode_on_success",
    "encode_values",
    "url_field",
]
