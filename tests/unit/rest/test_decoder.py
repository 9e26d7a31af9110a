"""Unit tests for response decoders."""

from __future__ import annotations

import dataclasses
import xml.etree.ElementTree as ET

import httpx
import pydantic
import pytest

from nap.kernel.errors import DecodeError
from nap.rest.decoder import JsonDecoder, XmlDecoder, element_to_python


class Repo(pydantic.BaseModel):
    name: str
    stars: int


@dataclasses.dataclass
class Point:
    x: int
    y: int


def _response(content: bytes, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=content)


class TestJsonDecoder:
    def test_into_model(self) -> None:
        repo = JsonDecoder().decode(_response(b'{"name": "nap", "stars": 7}'), Repo)
        assert repo == Repo(name="nap", stars=7)

    def test_into_container_of_models(self) -> None:
        body = b'[{"name": "a", "stars": 1}, {"name": "b", "stars": 2}]'
        repos = JsonDecoder().decode(_response(body), list[Repo])
        assert [r.name for r in repos] == ["a", "b"]

    def test_into_dataclass_and_dict(self) -> None:
        assert JsonDecoder().decode(_response(b'{"x": 1, "y": 2}'), Point) == Point(1, 2)
        assert JsonDecoder().decode(_response(b'{"x": 1}'), dict) == {"x": 1}

    def test_malformed_json(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            JsonDecoder().decode(_response(b"{not json", 500), Repo)
        assert exc_info.value.status_code == 500
        assert exc_info.value.target is Repo
        assert isinstance(exc_info.value.cause, pydantic.ValidationError)

    def test_validation_failure(self) -> None:
        with pytest.raises(DecodeError):
            JsonDecoder().decode(_response(b'{"name": "nap"}'), Repo)


class TestXmlDecoder:
    def test_into_model(self) -> None:
        body = b"<repo><name>nap</name><stars>7</stars></repo>"
        assert XmlDecoder().decode(_response(body), Repo) == Repo(name="nap", stars=7)

    def test_repeated_tags_become_lists(self) -> None:
        body = b"<r><tag>a</tag><tag>b</tag><one>x</one></r>"
        assert XmlDecoder().decode(_response(body), dict) == {"tag": ["a", "b"], "one": "x"}

    def test_malformed_xml(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            XmlDecoder().decode(_response(b"<open>"), Repo)
        assert isinstance(exc_info.value.cause, ET.ParseError)

    def test_validation_failure(self) -> None:
        with pytest.raises(DecodeError):
            XmlDecoder().decode(_response(b"<r><stars>many</stars></r>"), Repo)


class TestElementToPython:
    def test_nested(self) -> None:
        root = ET.fromstring("<a><b><c> 1 </c></b><d/></a>")
        assert element_to_python(root) == {"b": {"c": "1"}, "d": ""}
