from __future__ import annotations

import pytest

from krea_mcp.utils.json_utils import (
    as_object,
    extract_http_urls,
    looks_like_http_url,
    pick_job,
    read_string,
    read_unknown,
    stringify_unknown,
)


def test_extract_http_urls_mixed_payload():
    value = {"a": "https://x.test/i.png", "b": ["not a url", "http://y.test/j.png"], "c": {"d": "ftp://bad"}}
    assert set(extract_http_urls(value)) == {"https://x.test/i.png", "http://y.test/j.png"}


def test_extract_http_urls_ignores_non_strings_and_dedupes():
    value = {"n": 1, "b": True, "none": None, "urls": ["https://a.test/1.png", "https://a.test/1.png"]}
    assert extract_http_urls(value) == ["https://a.test/1.png"]


def test_extract_http_urls_handles_deep_nesting():
    value: object = "https://deep.test/x.png"
    for _ in range(5000):
        value = [value]
    assert extract_http_urls(value) == ["https://deep.test/x.png"]


@pytest.mark.parametrize(
    "candidate, expected",
    [
        ("https://x.test/a.png", True),
        ("HTTP://x.test", True),
        ("https://", False),
        ("ftp://x.test/a.png", False),
        ("http://:80", False),
        ("http://exa mple.com/a.png", False),
        ("https://x.test:notaport/a.png", False),
        ("https://x.test:8443/a.png", True),
        ("x.test/a.png", False),
        ("", False),
    ],
)
def test_looks_like_http_url(candidate, expected):
    assert looks_like_http_url(candidate) is expected


def test_read_unknown_walks_paths_without_raising():
    obj = {"data": {"output": ["u"], "status": 3}}
    assert read_unknown(obj, "data", "output") == ["u"]
    assert read_unknown(obj, "data", "missing") is None
    assert read_unknown(obj, "data", "output", "deeper") is None
    assert read_unknown("not a dict", "x") is None
    assert read_string(obj, "data", "status") is None


def test_pick_job_variants():
    assert pick_job({"job": {"id": "a"}}) == {"id": "a"}
    assert pick_job({"id": "b"}) == {"id": "b"}
    assert pick_job({"job": "weird", "id": "c"}) == {"job": "weird", "id": "c"}
    assert pick_job("plain text") == {}
    assert pick_job(None) == {}


def test_as_object():
    assert as_object({"a": 1}) == {"a": 1}
    assert as_object([1]) is None


def test_stringify_unknown():
    assert stringify_unknown("raw") == "raw"
    assert stringify_unknown({"a": [1, 2]}) == '{"a":[1,2]}'
    assert stringify_unknown(None) == "null"


def test_extract_http_urls_skips_hostless_and_malformed_urls():
    value = {"urls": ["http://:80", "http://exa mple.com/a.png", "https://ok.test/a.png"]}
    assert extract_http_urls(value) == ["https://ok.test/a.png"]
