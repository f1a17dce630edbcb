"""Tests for the related-words lookup and its fallback."""
import requests

from asciimorph.core.related import DEFAULT_RELATED_WORDS, fetch_related_words, parse_related_words


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.bad_json:
            raise ValueError("not json")
        return self.payload


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


class TestParse:
    def test_comma_separated(self):
        assert parse_related_words({"related_words": " sea, wave ,, tide "}) == ["sea", "wave", "tide"]

    def test_missing_field_falls_back(self):
        assert parse_related_words({}) == DEFAULT_RELATED_WORDS
        assert parse_related_words({"related_words": ""}) == DEFAULT_RELATED_WORDS
        assert parse_related_words(["not", "a", "mapping"]) == DEFAULT_RELATED_WORDS


class TestFetch:
    def test_success(self):
        http = FakeHttp(FakeResponse({"related_words": "sea,wave"}))
        words = fetch_related_words("ocean", url="http://words.test", timeout=2.0, http=http)
        assert words == ["sea", "wave"]
        assert http.calls == [("http://words.test", {"input_word": "ocean"}, 2.0)]

    def test_no_url_skips_network(self):
        http = FakeHttp(error=AssertionError("should not be called"))
        assert fetch_related_words("ocean", url=None, http=http) == DEFAULT_RELATED_WORDS
        assert http.calls == []

    def test_connection_error_falls_back(self):
        http = FakeHttp(error=requests.ConnectionError("down"))
        assert fetch_related_words("ocean", url="http://words.test", http=http) == DEFAULT_RELATED_WORDS

    def test_http_error_falls_back(self):
        http = FakeHttp(FakeResponse(status=503))
        assert fetch_related_words("ocean", url="http://words.test", http=http) == DEFAULT_RELATED_WORDS

    def test_bad_json_falls_back(self):
        http = FakeHttp(FakeResponse(bad_json=True))
        assert fetch_related_words("ocean", url="http://words.test", http=http) == DEFAULT_RELATED_WORDS

    def test_defaults_are_a_copy(self):
        words = fetch_related_words("x")
        words.append("extra")
        assert "extra" not in DEFAULT_RELATED_WORDS
